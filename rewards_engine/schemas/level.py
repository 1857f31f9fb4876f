from pydantic import BaseModel


class LevelEntry(BaseModel):
    level: int
    name: str
    required_points: int

    class Config:
        frozen = True


class LevelProgress(BaseModel):
    percentage: float
    points_needed: int
    next_level_name: str
