from fastapi import APIRouter, Depends

from rewards_engine.deps.store import get_engine_config
from rewards_engine.schemas.level import LevelEntry, LevelProgress
from rewards_engine.services.engine_config import EngineConfig
from rewards_engine.services.level_service import progress_to_next


router = APIRouter(prefix="/levels", tags=["levels"])


@router.get("", response_model=list[LevelEntry])
def list_levels(config: EngineConfig = Depends(get_engine_config)):
    return list(config.level_table.entries)


@router.get("/progress", response_model=LevelProgress)
def read_progress(points: int, config: EngineConfig = Depends(get_engine_config)):
    return progress_to_next(points, config.level_table)
