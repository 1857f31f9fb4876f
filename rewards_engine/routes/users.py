from fastapi import APIRouter, Depends, HTTPException

from rewards_engine.deps.store import get_engine_config, get_store
from rewards_engine.errors import UserNotFound
from rewards_engine.schemas.badge import EarnedBadge
from rewards_engine.schemas.recognition import RecognitionEvent
from rewards_engine.schemas.redemption import RedemptionRecord
from rewards_engine.schemas.summary import UserSummaryOut
from rewards_engine.schemas.user import User, UserStatus
from rewards_engine.services.badge_service import calculate_earned_badges
from rewards_engine.services.engine_config import EngineConfig
from rewards_engine.services.snapshot_service import SnapshotStore, find_user
from rewards_engine.services.summary_service import (
    received_recognitions,
    recognition_history,
    redemption_history,
    user_summary,
)


router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[User])
def list_users(active: bool | None = None, store: SnapshotStore = Depends(get_store)):
    users = store.get_users()
    if active is not None:
        users = [u for u in users if (u.status == UserStatus.ACTIVE) is active]
    return users


@router.get("/{user_id}/summary", response_model=UserSummaryOut)
def read_user_summary(
    user_id: str,
    store: SnapshotStore = Depends(get_store),
    config: EngineConfig = Depends(get_engine_config),
):
    try:
        return user_summary(store.snapshot, user_id, config)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")


@router.get("/{user_id}/badges", response_model=list[EarnedBadge])
def read_user_badges(
    user_id: str,
    store: SnapshotStore = Depends(get_store),
    config: EngineConfig = Depends(get_engine_config),
):
    snapshot = store.snapshot
    try:
        find_user(snapshot, user_id)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")

    received = received_recognitions(snapshot, user_id)
    return calculate_earned_badges(received, config.badges, config.badge_threshold)


@router.get("/{user_id}/recognitions", response_model=list[RecognitionEvent])
def list_user_recognitions(user_id: str, store: SnapshotStore = Depends(get_store)):
    snapshot = store.snapshot
    try:
        find_user(snapshot, user_id)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    return recognition_history(snapshot, user_id)


@router.get("/{user_id}/redemptions", response_model=list[RedemptionRecord])
def list_user_redemptions(user_id: str, store: SnapshotStore = Depends(get_store)):
    snapshot = store.snapshot
    try:
        find_user(snapshot, user_id)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    return redemption_history(snapshot, user_id)
