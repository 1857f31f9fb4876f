from fastapi import APIRouter, Depends, HTTPException

from rewards_engine.deps.store import get_engine_config, get_store
from rewards_engine.errors import RewardNotFound, SnapshotConflict, UserNotFound
from rewards_engine.schemas.redemption import RedemptionCreate, RedemptionDenied, RedemptionRecord
from rewards_engine.services.engine_config import EngineConfig
from rewards_engine.services.redemption_service import request_redemption
from rewards_engine.services.snapshot_service import SnapshotStore


router = APIRouter(prefix="/redemptions", tags=["redemptions"])


@router.post(
    "",
    response_model=RedemptionRecord,
    status_code=201,
    responses={409: {"model": RedemptionDenied}},
)
def create_redemption(
    payload: RedemptionCreate,
    store: SnapshotStore = Depends(get_store),
    config: EngineConfig = Depends(get_engine_config),
):
    try:
        result = request_redemption(store, payload.userId, payload.rewardId, config=config)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    except RewardNotFound:
        raise HTTPException(status_code=404, detail="Reward not found")
    except SnapshotConflict as e:
        raise HTTPException(status_code=503, detail=str(e))

    if not result.ok:
        raise HTTPException(
            status_code=409,
            detail=RedemptionDenied(
                error=result.error.value,
                message=result.message,
                userId=payload.userId,
                rewardId=payload.rewardId,
            ).model_dump(),
        )

    return result.record
