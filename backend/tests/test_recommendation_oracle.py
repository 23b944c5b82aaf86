import json

import pytest

from config import settings
from conftest import FakeGenerate, recommendation_json
from models.requests import ExtractedData, MilitaryInfo
from models.schemas.parse_result import Recommendations, Unavailable
from services import prompt_builder
from services.recommendation_oracle import RecommendationOracle

MANUAL = ExtractedData(
    military_info=MilitaryInfo(rank="E-6", branch="Army", mos="25B"),
    skills=["Leadership", "System Administration"],
)


def make_oracle(generate, fake_sleep, chunk_chars=15000, delay=20):
    return RecommendationOracle(generate=generate, chunk_chars=chunk_chars, delay_seconds=delay, sleep=fake_sleep)


class TestPrompts:
    def test_manual_prompt_uses_structured_fields(self):
        prompt = prompt_builder.build_manual_prompt(MANUAL)
        assert "E-6 - Army - 25B" in prompt
        assert "Leadership, System Administration" in prompt
        assert '"recommendations"' in prompt

    @pytest.mark.asyncio
    async def test_resume_text_selects_resume_prompt(self, fake_sleep):
        generate = FakeGenerate(recommendation_json("Network Administrator"))
        data = MANUAL.model_copy(update={"resume_text": "Served as network admin"})
        await make_oracle(generate, fake_sleep).get_recommendations(data)
        assert "Served as network admin" in generate.prompts[0]
        assert "25B" not in generate.prompts[0]

    @pytest.mark.asyncio
    async def test_blank_resume_text_selects_manual_prompt(self, fake_sleep):
        generate = FakeGenerate(recommendation_json("Systems Administrator"))
        data = MANUAL.model_copy(update={"resume_text": "   "})
        await make_oracle(generate, fake_sleep).get_recommendations(data)
        assert "E-6 - Army - 25B" in generate.prompts[0]


class TestGetRecommendations:
    @pytest.mark.asyncio
    async def test_manual_entry_single_call(self, fake_sleep):
        generate = FakeGenerate(recommendation_json("Systems Administrator", "IT Manager"))
        outcome = await make_oracle(generate, fake_sleep).get_recommendations(MANUAL)
        assert isinstance(outcome, Recommendations)
        assert [r.title for r in outcome.recommendations] == ["Systems Administrator", "IT Manager"]
        assert len(generate.prompts) == 1
        assert fake_sleep.calls == []

    @pytest.mark.asyncio
    async def test_resume_is_chunked_with_delay(self, fake_sleep):
        resume = "\n".join(["a" * 80] * 5)
        generate = FakeGenerate(*(recommendation_json(f"Role {i}") for i in range(3)))
        data = ExtractedData(resume_text=resume)
        outcome = await make_oracle(generate, fake_sleep, chunk_chars=200, delay=7).get_recommendations(data)
        assert isinstance(outcome, Recommendations)
        assert len(generate.prompts) == 3
        assert fake_sleep.calls == [7, 7]
        assert [r.title for r in outcome.recommendations] == ["Role 0", "Role 1", "Role 2"]

    @pytest.mark.asyncio
    async def test_failed_chunk_is_skipped(self, fake_sleep):
        resume = "\n".join(["a" * 80] * 5)
        generate = FakeGenerate(
            recommendation_json("Role 0"),
            RuntimeError("quota exceeded"),
            None,
        )
        data = ExtractedData(resume_text=resume)
        outcome = await make_oracle(generate, fake_sleep, chunk_chars=200).get_recommendations(data)
        assert isinstance(outcome, Recommendations)
        assert [r.title for r in outcome.recommendations] == ["Role 0"]

    @pytest.mark.asyncio
    async def test_every_chunk_failing_is_unavailable(self, fake_sleep):
        generate = FakeGenerate(RuntimeError("down"), None)
        data = ExtractedData(resume_text="a" * 150 + "\n" + "b" * 150)
        outcome = await make_oracle(generate, fake_sleep, chunk_chars=200).get_recommendations(data)
        assert isinstance(outcome, Unavailable)

    @pytest.mark.asyncio
    async def test_unparseable_text_is_empty_not_unavailable(self, fake_sleep):
        generate = FakeGenerate("Sorry, I can't do that right now.")
        outcome = await make_oracle(generate, fake_sleep).get_recommendations(MANUAL)
        assert isinstance(outcome, Recommendations)
        assert outcome.recommendations == []

    @pytest.mark.asyncio
    async def test_not_configured_is_unavailable(self, monkeypatch):
        monkeypatch.setattr(settings, "gemini_api_key", "")
        outcome = await RecommendationOracle().get_recommendations(MANUAL)
        assert isinstance(outcome, Unavailable)

    @pytest.mark.asyncio
    async def test_does_not_mutate_input(self, fake_sleep):
        before = MANUAL.model_dump()
        await make_oracle(FakeGenerate(recommendation_json("X")), fake_sleep).get_recommendations(MANUAL)
        assert MANUAL.model_dump() == before


class TestExtractProfile:
    @pytest.mark.asyncio
    async def test_merges_chunk_profiles(self, fake_sleep):
        first = {"militaryInfo": {"rank": "E-5", "branch": "Navy"}, "skills": ["Leadership"]}
        second = {"militaryInfo": {"rank": "E-6"}, "skills": ["Cybersecurity", "leadership"],
                  "experience": [{"title": "Network Technician"}]}
        generate = FakeGenerate(json.dumps(first), "```json\n" + json.dumps(second) + "\n```")
        resume = "a" * 150 + "\n" + "b" * 150
        profile = await make_oracle(generate, fake_sleep, chunk_chars=200).extract_profile(resume)
        assert profile.military_info.rank == "E-5"
        assert profile.military_info.branch == "Navy"
        assert profile.skills == ["Leadership", "Cybersecurity"]
        assert profile.experience[0].title == "Network Technician"
        assert profile.resume_text == resume

    @pytest.mark.asyncio
    async def test_keeps_profile_with_null_fields(self, fake_sleep):
        reported = {
            "militaryInfo": {"serviceType": "Officer", "rank": "O-3", "branch": "Air Force", "mos": "17S"},
            "skills": ["Cybersecurity"],
            "certifications": [{"name": "CISSP", "issuer": None, "dateObtained": None, "isActive": True}],
            "experience": [{"title": "Cyber Officer", "organization": None, "startDate": None, "endDate": None}],
            "education": [{"type": "Bachelor", "field": "Computer Science", "institution": None,
                           "graduationDate": None}],
        }
        generate = FakeGenerate(json.dumps(reported))
        profile = await make_oracle(generate, fake_sleep).extract_profile("Cyber officer resume")
        assert profile.military_info.service_type == "Officer"
        assert profile.military_info.rank == "O-3"
        assert profile.military_info.mos == "17S_AF"
        assert profile.certifications[0].name == "CISSP"
        assert profile.experience[0].title == "Cyber Officer"
        assert profile.education[0].field == "Computer Science"

    @pytest.mark.asyncio
    async def test_invalid_chunk_skipped(self, fake_sleep):
        generate = FakeGenerate("not json", json.dumps({"skills": ["Leadership"]}))
        resume = "a" * 150 + "\n" + "b" * 150
        profile = await make_oracle(generate, fake_sleep, chunk_chars=200).extract_profile(resume)
        assert profile.skills == ["Leadership"]

    @pytest.mark.asyncio
    async def test_falls_back_to_regex(self, fake_sleep):
        generate = FakeGenerate(RuntimeError("down"))
        resume = "Served in the United States Army as an E-6. Skills: Leadership"
        profile = await make_oracle(generate, fake_sleep).extract_profile(resume)
        assert profile.military_info.branch == "Army"
        assert profile.military_info.rank == "E-6"
        assert "Leadership" in profile.skills
