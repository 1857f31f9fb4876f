import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from rewards_engine.errors import SnapshotConflict
from rewards_engine.schemas.redemption import RedemptionRecord, RedemptionStatus
from rewards_engine.schemas.reward import RewardDefinition
from rewards_engine.schemas.user import User
from rewards_engine.services.engine_config import EngineConfig, default_engine_config
from rewards_engine.services.inventory_service import available_stock
from rewards_engine.services.scoring_service import net_points
from rewards_engine.services.snapshot_service import SnapshotStore, find_reward, find_user
from rewards_engine.services.summary_service import user_gross_points, user_redemptions


logger = logging.getLogger(__name__)


class AdmissionError(str, Enum):
    INSUFFICIENT_POINTS = "insufficient_points"
    OUT_OF_STOCK = "out_of_stock"
    LEVEL_TOO_LOW = "level_too_low"


ADMISSION_MESSAGES = {
    AdmissionError.INSUFFICIENT_POINTS: "Not enough points for this reward",
    AdmissionError.OUT_OF_STOCK: "Reward is out of stock",
    AdmissionError.LEVEL_TOO_LOW: "User level is below the reward's required level",
}


@dataclass(frozen=True)
class RedemptionResult:
    record: RedemptionRecord | None = None
    error: AdmissionError | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @property
    def message(self) -> str | None:
        return ADMISSION_MESSAGES.get(self.error) if self.error else None


# ============================================================
# Final gate
# ============================================================
def check_admission(reward: RewardDefinition, current_net_points: int, current_stock: int) -> AdmissionError | None:
    """
    Re-validate stock and points at confirmation time.

    Stock first: when the last unit is gone that is what the user needs to
    hear, whatever their balance.
    """
    if current_stock <= 0:
        return AdmissionError.OUT_OF_STOCK
    if current_net_points < reward.point_cost:
        return AdmissionError.INSUFFICIENT_POINTS
    return None


def new_redemption_record(user: User, reward: RewardDefinition, *, points_before: int, now: datetime) -> RedemptionRecord:
    return RedemptionRecord(
        id=f"red-{uuid.uuid4().hex}",
        user_id=user.id,
        reward_id=reward.id,
        timestamp=now,
        status=RedemptionStatus.PENDING,
        required_points=reward.point_cost,
        points_before=points_before,
        points_after=points_before - reward.point_cost,
    )


# ============================================================
# REQUEST REDEMPTION
# ============================================================
def request_redemption(
    store: SnapshotStore,
    user_id: str,
    reward_id: str,
    *,
    config: EngineConfig | None = None,
    now: datetime | None = None,
    max_attempts: int = 3,
) -> RedemptionResult:
    """
    Admit or deny a redemption and, when admitted, append the pending record.

    The decision and the append happen while holding the user's and the
    reward's locks, against the snapshot current at that moment. If the
    snapshot is reloaded in between, the decision is taken again on the new
    data. Denials are returned, never raised; an unknown user or reward
    raises ``UserNotFound`` / ``RewardNotFound``.
    """
    config = config or default_engine_config()

    with store.redemption_locks(user_id, reward_id):
        for attempt in range(1, max_attempts + 1):
            snapshot = store.snapshot
            user = find_user(snapshot, user_id)
            reward = find_reward(snapshot, reward_id)

            gross = user_gross_points(snapshot, user, config)
            level = config.level_table.level_for(gross)
            if level.level < reward.required_level:
                return _deny(user, reward, AdmissionError.LEVEL_TOO_LOW)

            current_net = net_points(gross, user_redemptions(snapshot, user.id), snapshot.rewards)
            current_stock = available_stock(reward, snapshot.redemptions)

            error = check_admission(reward, current_net, current_stock)
            if error is not None:
                return _deny(user, reward, error)

            record = new_redemption_record(
                user,
                reward,
                points_before=current_net,
                now=now or datetime.now(timezone.utc),
            )
            if store.append_redemption(record, expected_version=snapshot.version):
                logger.info(
                    "redemption admitted",
                    extra={
                        "redemption_id": record.id,
                        "user_id": user.id,
                        "reward_id": reward.id,
                        "cost": reward.point_cost,
                        "net_points_before": current_net,
                        "stock_before": current_stock,
                    },
                )
                return RedemptionResult(record=record)

            logger.info(
                "snapshot reloaded during admission, retrying",
                extra={"user_id": user_id, "reward_id": reward_id, "attempt": attempt},
            )

    raise SnapshotConflict(f"Snapshot changed {max_attempts} times while admitting redemption")


def _deny(user: User, reward: RewardDefinition, error: AdmissionError) -> RedemptionResult:
    logger.info(
        "redemption denied",
        extra={"user_id": user.id, "reward_id": reward.id, "reason": error.value},
    )
    return RedemptionResult(error=error)
