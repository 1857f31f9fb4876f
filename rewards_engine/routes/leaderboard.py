from fastapi import APIRouter, Depends, Query

from rewards_engine.constants import LEADERBOARD_SIZE
from rewards_engine.deps.store import get_engine_config, get_store
from rewards_engine.schemas.summary import LeaderboardEntry
from rewards_engine.services.engine_config import EngineConfig
from rewards_engine.services.snapshot_service import SnapshotStore
from rewards_engine.services.stats_service import leaderboard


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=list[LeaderboardEntry])
def read_leaderboard(
    limit: int = Query(default=LEADERBOARD_SIZE, ge=1, le=100),
    store: SnapshotStore = Depends(get_store),
    config: EngineConfig = Depends(get_engine_config),
):
    return leaderboard(store.snapshot, limit, config)
