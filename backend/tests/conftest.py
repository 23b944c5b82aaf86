"""Shared test configuration, pytest markers and oracle fakes."""

import json

import pytest

from api.router import limiter
from models.requests import ExtractedData


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: talks to a real external service (needs API keys)"
    )


@pytest.fixture(autouse=True)
def _disable_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


class FakeGenerate:
    """Stands in for gemini_client.generate_text: replays responses in order.

    A response that is an Exception instance is raised instead of returned.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts: list[str] = []

    async def __call__(self, prompt, system_instruction=None):
        self.prompts.append(prompt)
        if not self.responses:
            return None
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeSleep:
    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


def recommendation_json(*titles, overall=85):
    return json.dumps({
        "recommendations": [
            {
                "title": title,
                "matchPercentages": {
                    "skillMatch": 90,
                    "experienceMatch": 80,
                    "mosMatch": 70,
                    "technicalMatch": 60,
                    "overallMatch": overall,
                },
                "reasonForMatch": f"{title} uses your cybersecurity background",
                "requiredSkills": ["Cybersecurity", "Leadership"],
                "suggestedIndustries": ["Technology", "Defense"],
                "recommendedCertifications": ["Security+"],
                "careerProgression": "Analyst -> Lead -> Manager",
            }
            for title in titles
        ]
    })


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def cyber_profile():
    return ExtractedData.model_validate({
        "militaryInfo": {"serviceType": "Officer", "rank": "O-3", "branch": "Air Force", "mos": "17S_AF"},
        "skills": ["Cybersecurity", "Leadership"],
        "technicalSkills": [{"name": "Python", "proficiency": "Advanced", "yearsOfExperience": 4}],
        "experience": [
            {
                "title": "Cyber Warfare Operations Officer",
                "organization": "USAF",
                "startDate": "2019-01-01",
                "endDate": "2023-01-01",
                "description": "Led defensive cyber operations",
            }
        ],
    })
