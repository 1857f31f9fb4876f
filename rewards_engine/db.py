import urllib.parse

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from rewards_engine.config import get_settings


Base = declarative_base()

_engine = None
_session_factory = None


def _normalize_url(database_url: str) -> str:
    try:
        parsed = urllib.parse.urlparse(database_url)
        return urllib.parse.urlunparse(parsed)
    except Exception:
        return database_url.encode("utf-8", errors="replace").decode("utf-8")


def make_engine(database_url: str):
    database_url = _normalize_url(database_url)

    connect_args = {}
    if database_url.startswith("postgres"):
        connect_args = {"options": "-c timezone=utc"}
    elif database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

    return create_engine(database_url, connect_args=connect_args)


def get_engine():
    global _engine, _session_factory
    if _engine is None:
        url = get_settings().database_url
        if not url:
            raise RuntimeError("DATABASE_URL is not configured")
        _engine = make_engine(url)
        _session_factory = sessionmaker(bind=_engine, autoflush=False, autocommit=False)
    return _engine


def SessionLocal():
    get_engine()
    return _session_factory()
