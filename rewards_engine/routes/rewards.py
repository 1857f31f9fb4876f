from fastapi import APIRouter, Depends, HTTPException

from rewards_engine.deps.store import get_store
from rewards_engine.errors import RewardNotFound
from rewards_engine.schemas.reward import RewardOut
from rewards_engine.services.inventory_service import rewards_with_stock
from rewards_engine.services.snapshot_service import SnapshotStore, find_reward


router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.get("", response_model=list[RewardOut])
def list_rewards(
    level: int | None = None,
    in_stock: bool | None = None,
    store: SnapshotStore = Depends(get_store),
):
    snapshot = store.snapshot
    rewards = rewards_with_stock(snapshot.rewards, snapshot.redemptions)
    if level is not None:
        rewards = [r for r in rewards if r.required_level == level]
    if in_stock is not None:
        rewards = [r for r in rewards if (r.available_stock > 0) is in_stock]
    return rewards


@router.get("/{reward_id}", response_model=RewardOut)
def get_reward(reward_id: str, store: SnapshotStore = Depends(get_store)):
    snapshot = store.snapshot
    try:
        reward = find_reward(snapshot, reward_id)
    except RewardNotFound:
        raise HTTPException(status_code=404, detail="Reward not found")
    return rewards_with_stock([reward], snapshot.redemptions)[0]
