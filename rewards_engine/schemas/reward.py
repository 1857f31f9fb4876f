from typing import Optional

from pydantic import BaseModel, Field


class RewardDefinition(BaseModel):
    id: str
    name: str = ""
    description: str = ""

    required_level: int = Field(default=0, ge=0)
    initial_stock: int = Field(default=0, ge=0)
    point_cost: int = Field(default=0, ge=0)

    image_url: Optional[str] = None

    class Config:
        frozen = True


class RewardOut(BaseModel):
    id: str
    name: str
    description: str

    required_level: int
    initial_stock: int
    point_cost: int
    available_stock: int

    image_url: Optional[str] = None
