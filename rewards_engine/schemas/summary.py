from typing import Optional

from pydantic import BaseModel

from rewards_engine.schemas.badge import EarnedBadge
from rewards_engine.schemas.level import LevelEntry, LevelProgress
from rewards_engine.schemas.redemption import RedemptionRecord


class MonthlyCount(BaseModel):
    month: str  # YYYY-MM
    label: str
    count: int


class UserSummaryOut(BaseModel):
    user_id: str
    name: str

    received_count: int
    given_count: int
    historical_points: int

    gross_points: int
    net_points: int

    level: LevelEntry
    progress: LevelProgress

    badges: list[EarnedBadge]
    # newest first
    redemptions: list[RedemptionRecord]
    recognitions_by_month: list[MonthlyCount]


class LeaderboardEntry(BaseModel):
    position: int
    user_id: str
    name: str
    points: int


class TopRecognized(BaseModel):
    user_id: str
    name: Optional[str] = None
    count: int


class PrincipleCount(BaseModel):
    principle: str
    count: int


class AdminStatsOut(BaseModel):
    active_users: int
    total_recognitions: int
    total_redemptions: int

    top_recognized: list[TopRecognized]
    principles: list[PrincipleCount]
