import re

import pytest

from conftest import FakeGenerate, recommendation_json
from models.requests import ExtractedData, MilitaryInfo
from models.schemas.oracle_recommendation import MatchPercentages, RawRecommendation
from services import career_matcher
from services.career_matcher import FALLBACK_ROLES
from services.recommendation_oracle import RecommendationOracle
from services.result_aggregator import FALLBACK_TRENDS
from services.salary_data import SalaryDataService


def make_oracle(generate, fake_sleep):
    return RecommendationOracle(generate=generate, delay_seconds=0, sleep=fake_sleep)


class TestHelpers:
    @pytest.mark.parametrize("score,trend", [(95, "High"), (81, "High"), (80, "Medium"), (61, "Medium"), (60, "Low"), (0, "Low")])
    def test_demand_trend(self, score, trend):
        assert career_matcher.demand_trend(score) == trend

    def test_id_format(self):
        assert re.fullmatch(r"job-\d+-[a-z0-9]{9}", career_matcher.new_recommendation_id())

    def test_convert_clamps_and_enriches(self):
        raw = RawRecommendation(
            title="Senior Security Engineer",
            match_percentages=MatchPercentages(skill_match=120, experience_match=79.6, overall_match=91.4),
            reason_for_match="Deep cyber background",
            suggested_industries=["Technology"],
        )
        converted = career_matcher.convert_recommendation(raw, SalaryDataService())
        assert converted.match_score == 91
        assert converted.match_details.skill_match == 100
        assert converted.match_details.experience_match == 80
        assert converted.demand_trend == "High"
        assert converted.salary_range == "$120,000 - $200,000"
        assert converted.salary_insights.median == 160000
        assert converted.description == "Deep cyber background"
        assert converted.industries == ["Technology"]

    def test_convert_with_rescoring(self, cyber_profile):
        raw = RawRecommendation(
            title="Cybersecurity Analyst",
            match_percentages=MatchPercentages(overall_match=10),
            reason_for_match="Needs cybersecurity and leadership",
        )
        converted = career_matcher.convert_recommendation(raw, SalaryDataService(), cyber_profile, rescore=True)
        assert converted.match_score > 10
        assert converted.match_details.skill_match == 100


class TestCalculateJobMatches:
    @pytest.mark.asyncio
    async def test_oracle_recommendations(self, cyber_profile, fake_sleep):
        generate = FakeGenerate(recommendation_json("Security Analyst", "SOC Lead", overall=85))
        response = await career_matcher.calculate_job_matches(
            cyber_profile, make_oracle(generate, fake_sleep), SalaryDataService(), rescore=False,
        )
        assert [r.title for r in response.recommendations] == ["Security Analyst", "SOC Lead"]
        assert all(r.match_score == 85 for r in response.recommendations)
        assert response.market_insights.top_locations == ["Technology", "Defense"]

    @pytest.mark.asyncio
    async def test_unavailable_serves_fallback_roles(self, cyber_profile, fake_sleep):
        generate = FakeGenerate(RuntimeError("503"))
        response = await career_matcher.calculate_job_matches(
            cyber_profile, make_oracle(generate, fake_sleep), SalaryDataService(),
        )
        titles = {r.title for r in response.recommendations}
        assert titles == {role.title for role in FALLBACK_ROLES}
        assert all(0 <= r.match_score <= 100 for r in response.recommendations)
        scores = [r.match_score for r in response.recommendations]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_unparseable_response_gives_empty_envelope(self, fake_sleep):
        data = ExtractedData(military_info=MilitaryInfo(branch="Navy"), skills=["Leadership"])
        generate = FakeGenerate("no structured content here")
        response = await career_matcher.calculate_job_matches(
            data, make_oracle(generate, fake_sleep), SalaryDataService(),
        )
        assert response.recommendations == []
        assert response.market_insights.key_trends == FALLBACK_TRENDS

    @pytest.mark.asyncio
    async def test_limit(self, cyber_profile, fake_sleep):
        generate = FakeGenerate(recommendation_json(*(f"Role {i}" for i in range(8))))
        response = await career_matcher.calculate_job_matches(
            cyber_profile, make_oracle(generate, fake_sleep), SalaryDataService(), limit=3,
        )
        assert len(response.recommendations) == 3
