from fastapi import APIRouter, Depends, HTTPException, Query

from rewards_engine.constants import TOP_RECOGNIZED_SIZE
from rewards_engine.deps.store import get_store
from rewards_engine.errors import SnapshotLoadError
from rewards_engine.schemas.snapshot import SnapshotInfo
from rewards_engine.schemas.summary import AdminStatsOut
from rewards_engine.services.snapshot_service import SnapshotStore
from rewards_engine.services.stats_service import admin_stats


router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=AdminStatsOut)
def read_admin_stats(
    top: int = Query(default=TOP_RECOGNIZED_SIZE, ge=1, le=50),
    store: SnapshotStore = Depends(get_store),
):
    return admin_stats(store.snapshot, top)


@router.get("/snapshot", response_model=SnapshotInfo)
def read_snapshot_info(store: SnapshotStore = Depends(get_store)):
    return store.info()


@router.post("/snapshot/refresh", response_model=SnapshotInfo)
def refresh_snapshot(store: SnapshotStore = Depends(get_store)):
    try:
        store.refresh()
    except SnapshotLoadError as e:
        raise HTTPException(status_code=503, detail=f"Snapshot refresh failed: {e}")
    return store.info()
