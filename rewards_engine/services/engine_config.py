from dataclasses import dataclass

from rewards_engine.config import Settings
from rewards_engine.constants import BADGE_THRESHOLD, LEVELS, POINTS_PER_RECOGNITION
from rewards_engine.schemas.badge import BadgeDefinition
from rewards_engine.services.badge_service import DEFAULT_BADGES
from rewards_engine.services.level_service import LevelTable


@dataclass(frozen=True)
class EngineConfig:
    level_table: LevelTable
    badges: tuple[BadgeDefinition, ...]
    badge_threshold: int = BADGE_THRESHOLD
    points_per_recognition: int = POINTS_PER_RECOGNITION


def default_engine_config() -> EngineConfig:
    return EngineConfig(level_table=LevelTable(LEVELS), badges=tuple(DEFAULT_BADGES))


def engine_config_from_settings(settings: Settings) -> EngineConfig:
    if settings.badge_threshold < 1:
        raise ValueError("BADGE_THRESHOLD must be >= 1")
    if settings.points_per_recognition < 0:
        raise ValueError("POINTS_PER_RECOGNITION must be >= 0")

    return EngineConfig(
        level_table=LevelTable(LEVELS),
        badges=tuple(DEFAULT_BADGES),
        badge_threshold=settings.badge_threshold,
        points_per_recognition=settings.points_per_recognition,
    )
