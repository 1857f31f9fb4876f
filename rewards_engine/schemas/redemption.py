from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator

from rewards_engine.schemas.timestamps import as_utc


class RedemptionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    UNSPECIFIED = "unspecified"


class RedemptionRecord(BaseModel):
    id: str
    user_id: str
    reward_id: str

    timestamp: Optional[datetime] = None
    status: RedemptionStatus = RedemptionStatus.UNSPECIFIED

    # bookkeeping columns carried by the external log, informational only
    required_points: Optional[int] = None
    points_before: Optional[int] = None
    points_after: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value):
        return as_utc(value)

    class Config:
        frozen = True


class RedemptionCreate(BaseModel):
    userId: str
    rewardId: str


class RedemptionDenied(BaseModel):
    error: str
    message: str
    userId: str
    rewardId: str
