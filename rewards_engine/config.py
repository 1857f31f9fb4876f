import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

# Load .env file with explicit UTF-8 encoding
load_dotenv(encoding="utf-8")


SNAPSHOT_SOURCES = {"csv", "sql", "memory"}

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "https://localhost:3000",
    "http://127.0.0.1:3000",
    "https://127.0.0.1:3000",
]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning("invalid integer setting, using default", extra={"setting": name, "value": raw, "default": default})
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    snapshot_source: str = "csv"
    snapshot_csv_dir: str = "./data"
    database_url: str | None = None

    points_per_recognition: int = 100
    badge_threshold: int = 3

    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"


def load_settings() -> Settings:
    source = (os.getenv("SNAPSHOT_SOURCE") or "csv").strip().lower()
    if source not in SNAPSHOT_SOURCES:
        logger.warning("unknown SNAPSHOT_SOURCE, falling back to csv", extra={"value": source})
        source = "csv"

    return Settings(
        snapshot_source=source,
        snapshot_csv_dir=os.getenv("SNAPSHOT_CSV_DIR") or "./data",
        database_url=os.getenv("DATABASE_URL") or None,
        points_per_recognition=_env_int("POINTS_PER_RECOGNITION", 100),
        badge_threshold=_env_int("BADGE_THRESHOLD", 3),
        cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
