from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class BadgeDefinition(BaseModel):
    name: str
    principle: str
    description: str

    class Config:
        frozen = True


class EarnedBadge(BaseModel):
    name: str
    principle: str
    description: str

    count: int
    earned: bool
    earned_date: Optional[datetime] = None

    class Config:
        frozen = True
