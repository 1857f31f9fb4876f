import logging
from typing import Iterable

from rewards_engine.constants import POINTS_PER_RECOGNITION
from rewards_engine.schemas.redemption import RedemptionRecord, RedemptionStatus
from rewards_engine.schemas.reward import RewardDefinition


logger = logging.getLogger(__name__)


def is_rejected(status) -> bool:
    if status is None:
        return False
    if isinstance(status, RedemptionStatus):
        return status is RedemptionStatus.REJECTED
    value = str(status).strip().lower()
    return value in {RedemptionStatus.REJECTED.value, "rechazado"}


def _as_cost(value) -> int:
    try:
        if value is None:
            return 0
        return int(value)
    except (TypeError, ValueError):
        return 0


# ============================================================
# GROSS POINTS
# ============================================================
def gross_points(
    received_count: int,
    historical_points: int = 0,
    points_per_recognition: int = POINTS_PER_RECOGNITION,
) -> int:
    """
    Points earned before any spending.

    Not floored: a negative carry-over balance shows through as a debt.
    """
    if received_count < 0:
        raise ValueError("received_count must be >= 0")
    return received_count * points_per_recognition + int(historical_points or 0)


# ============================================================
# SPENT / NET POINTS
# ============================================================
def spent_points(
    user_redemptions: Iterable[RedemptionRecord],
    all_rewards: Iterable[RewardDefinition],
) -> int:
    costs = {r.id: r.point_cost for r in all_rewards}

    total = 0
    for redemption in user_redemptions:
        if is_rejected(redemption.status):
            continue

        if redemption.reward_id not in costs:
            logger.warning(
                "redemption references unknown reward, counting cost as 0",
                extra={"redemption_id": redemption.id, "reward_id": redemption.reward_id},
            )
            continue

        total += _as_cost(costs[redemption.reward_id])

    return total


def net_points(
    gross: int,
    user_redemptions: Iterable[RedemptionRecord],
    all_rewards: Iterable[RewardDefinition],
) -> int:
    return gross - spent_points(user_redemptions, all_rewards)
