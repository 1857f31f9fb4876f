from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from rewards_engine.schemas.timestamps import as_utc


class RecognitionEvent(BaseModel):
    id: str
    giver_id: str
    receiver_id: str

    principle: str
    reason: str = ""

    # None when the source date could not be parsed
    timestamp: Optional[datetime] = None

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value):
        return as_utc(value)

    class Config:
        frozen = True
