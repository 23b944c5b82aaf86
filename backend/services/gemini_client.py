"""Google Gemini API wrapper with error handling."""

import logging

from google import genai
from google.genai import types

from config import settings

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - oracle features disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def is_configured() -> bool:
    return bool(settings.gemini_api_key)


async def generate_text(prompt: str, system_instruction: str | None = None) -> str | None:
    """Send a prompt to Gemini in JSON mode and return the raw response text.

    Returns None when the client is not configured, the call fails, or the
    response is empty. Parsing is left to the caller.
    """
    client = get_client()
    if client is None:
        return None

    try:
        response = await client.aio.models.generate_content(
            model=settings.gemini_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_instruction,
                temperature=settings.oracle_temperature,
                max_output_tokens=settings.oracle_max_output_tokens,
                response_mime_type="application/json",
            ),
        )
        text = response.text
        if not text or not text.strip():
            logger.error("Empty response from Gemini")
            return None
        return text

    except Exception as e:
        logger.error("Gemini API error: %s", e)
        return None
