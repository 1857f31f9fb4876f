from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class UserRole(str, Enum):
    CONTRIBUTOR = "contributor"
    GRANTER = "granter"
    ADMIN = "admin"


class User(BaseModel):
    id: str
    name: str = ""
    email: str = ""

    status: UserStatus = UserStatus.ACTIVE
    role: UserRole = UserRole.CONTRIBUTOR

    # carry-over balance from the previous program, may be negative (debt)
    historical_points: int = 0

    created_at: Optional[datetime] = None

    class Config:
        frozen = True
