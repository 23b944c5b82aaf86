"""Recommendation oracle client: background -> civilian job recommendations.

Flow:
    ExtractedData
      ├─ resume_text set → chunk (resume_chunk_chars) → resume prompt per chunk
      └─ otherwise       → one manual-entry prompt
    prompts → RateLimitedQueue (chunk_delay_seconds between calls)
            → gemini_client.generate_text → response_parser.parse_oracle_response
    → Recommendations(list) | Unavailable

A chunk whose call fails is skipped. Only when no call at all returns text is
the outcome Unavailable; the caller then serves the static fallback set.
Nothing here raises.
"""

import json
import logging
from typing import Awaitable, Callable

from pydantic import ValidationError

from config import settings
from models.requests import ExtractedData
from models.schemas.parse_result import Failed, OracleOutcome, Recommendations, Unavailable
from services import extraction, gemini_client, prompt_builder
from services.response_parser import parse_oracle_response, strip_fences
from services.throttle import RateLimitedQueue

logger = logging.getLogger(__name__)

GenerateFn = Callable[[str, str | None], Awaitable[str | None]]


class RecommendationOracle:
    """Prompt construction, rate-limited calls and response parsing around the oracle."""

    def __init__(
        self,
        generate: GenerateFn | None = None,
        chunk_chars: int | None = None,
        delay_seconds: float | None = None,
        sleep: Callable[[float], Awaitable] | None = None,
    ) -> None:
        if generate is None:
            self._generate = gemini_client.generate_text
            self._is_configured = gemini_client.is_configured
        else:
            self._generate = generate
            self._is_configured = lambda: True
        self.chunk_chars = chunk_chars or settings.resume_chunk_chars
        self.delay_seconds = settings.chunk_delay_seconds if delay_seconds is None else delay_seconds
        self._sleep = sleep

    def _queue(self, items: list[str]) -> RateLimitedQueue[str]:
        if self._sleep is None:
            return RateLimitedQueue(items, self.delay_seconds)
        return RateLimitedQueue(items, self.delay_seconds, sleep=self._sleep)

    def _recommendation_prompts(self, data: ExtractedData) -> list[str]:
        if data.resume_text and data.resume_text.strip():
            chunks = extraction.chunk_text(data.resume_text, self.chunk_chars)
            return [prompt_builder.build_resume_prompt(chunk) for chunk in chunks]
        return [prompt_builder.build_manual_prompt(data)]

    async def _call(self, prompt: str, index: int, total: int) -> str | None:
        try:
            return await self._generate(prompt, prompt_builder.SYSTEM_INSTRUCTION)
        except Exception as e:
            logger.warning("Oracle call %d/%d failed: %s", index, total, e)
            return None

    async def get_recommendations(self, data: ExtractedData) -> OracleOutcome:
        """Ask the oracle for recommendations. Never raises."""
        if not self._is_configured():
            return Unavailable(reason="oracle not configured")

        try:
            prompts = self._recommendation_prompts(data)
            collected = []
            answered = 0
            index = 0
            async for prompt in self._queue(prompts):
                index += 1
                text = await self._call(prompt, index, len(prompts))
                if text is None:
                    logger.warning("Skipping chunk %d/%d: no oracle response", index, len(prompts))
                    continue
                answered += 1
                result = parse_oracle_response(text)
                if isinstance(result, Failed):
                    logger.warning("Chunk %d/%d unparseable: %s", index, len(prompts), result.reason)
                else:
                    logger.info("Chunk %d/%d: %d recommendations (%s)",
                                index, len(prompts), len(result.recommendations), result.kind)
                collected.extend(result.recommendations)
        except Exception as e:
            logger.error("Oracle request failed: %s", e)
            return Unavailable(reason="oracle request failed")

        if answered == 0:
            return Unavailable(reason="no chunk produced a response")
        return Recommendations(recommendations=collected)

    async def extract_profile(self, resume_text: str) -> ExtractedData:
        """Structured profile from a resume, merged across chunks.

        Falls back to regex extraction when the oracle is unavailable or no
        chunk yields a valid profile.
        """
        parts: list[ExtractedData] = []
        if self._is_configured():
            chunks = extraction.chunk_text(resume_text, self.chunk_chars)
            index = 0
            async for chunk in self._queue(chunks):
                index += 1
                text = await self._call(prompt_builder.build_extraction_prompt(chunk), index, len(chunks))
                if text is None:
                    continue
                try:
                    parts.append(ExtractedData.model_validate(json.loads(strip_fences(text))))
                except (json.JSONDecodeError, ValidationError) as e:
                    logger.warning("Skipping chunk %d/%d: invalid profile JSON (%s)", index, len(chunks), e)

        if not parts:
            logger.info("Oracle profile extraction unavailable, using regex extraction")
            return extraction.extract_from_text(resume_text)

        merged = extraction.merge_extractions(parts)
        return merged.model_copy(update={"resume_text": resume_text})
