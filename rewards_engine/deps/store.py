from fastapi import Request

from rewards_engine.services.engine_config import EngineConfig
from rewards_engine.services.snapshot_service import SnapshotStore


def get_store(request: Request) -> SnapshotStore:
    return request.app.state.store


def get_engine_config(request: Request) -> EngineConfig:
    return request.app.state.engine_config
