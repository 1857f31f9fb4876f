from collections import Counter
from typing import Iterable

from rewards_engine.schemas.redemption import RedemptionRecord
from rewards_engine.schemas.reward import RewardDefinition, RewardOut
from rewards_engine.services.scoring_service import is_rejected


# Stock is always derived from the whole redemption log, never tracked
# incrementally, so out-of-band approvals and rejections are picked up.


def redeemed_counts(redemptions: Iterable[RedemptionRecord]) -> Counter:
    counts = Counter()
    for redemption in redemptions:
        if is_rejected(redemption.status):
            continue
        if redemption.reward_id:
            counts[redemption.reward_id] += 1
    return counts


def available_stock(reward: RewardDefinition, redemptions: Iterable[RedemptionRecord]) -> int:
    redeemed = redeemed_counts(r for r in redemptions if r.reward_id == reward.id)
    return max(0, reward.initial_stock - redeemed[reward.id])


def rewards_with_stock(
    rewards: Iterable[RewardDefinition],
    redemptions: Iterable[RedemptionRecord],
) -> list[RewardOut]:
    counts = redeemed_counts(redemptions)
    return [
        RewardOut(
            id=reward.id,
            name=reward.name,
            description=reward.description,
            required_level=reward.required_level,
            initial_stock=reward.initial_stock,
            point_cost=reward.point_cost,
            available_stock=max(0, reward.initial_stock - counts[reward.id]),
            image_url=reward.image_url,
        )
        for reward in rewards
    ]
