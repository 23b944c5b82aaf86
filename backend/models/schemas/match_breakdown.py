"""Match scorer output: sub-scores in [0, 1] and the 0-100 composite."""

from pydantic import BaseModel


class MatchBreakdown(BaseModel):
    skill_match: float = 0.0
    experience_match: float = 0.0
    mos_match: float = 0.0
    role_match: float = 0.0
    technical_match: float = 0.0
    composite: int = 0  # 0-100
