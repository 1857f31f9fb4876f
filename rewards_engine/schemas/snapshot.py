from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from rewards_engine.schemas.recognition import RecognitionEvent
from rewards_engine.schemas.redemption import RedemptionRecord
from rewards_engine.schemas.reward import RewardDefinition
from rewards_engine.schemas.user import User


class Snapshot(BaseModel):
    """
    Raw event log as supplied by the external store.

    Replaced wholesale on refresh; the only in-place change is the append of
    an admitted redemption record.
    """

    users: list[User] = []
    recognitions: list[RecognitionEvent] = []
    rewards: list[RewardDefinition] = []
    redemptions: list[RedemptionRecord] = []

    loaded_at: Optional[datetime] = None
    version: int = 0


class SnapshotInfo(BaseModel):
    version: int
    loaded_at: Optional[datetime] = None

    users: int
    recognitions: int
    rewards: int
    redemptions: int
