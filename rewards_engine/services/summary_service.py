from collections import Counter

from rewards_engine.constants import MONTH_LABELS
from rewards_engine.schemas.recognition import RecognitionEvent
from rewards_engine.schemas.redemption import RedemptionRecord
from rewards_engine.schemas.snapshot import Snapshot
from rewards_engine.schemas.summary import MonthlyCount, UserSummaryOut
from rewards_engine.schemas.user import User
from rewards_engine.services.badge_service import calculate_earned_badges
from rewards_engine.services.engine_config import EngineConfig, default_engine_config
from rewards_engine.services.level_service import progress_to_next
from rewards_engine.services.scoring_service import gross_points, net_points
from rewards_engine.services.snapshot_service import find_user


def received_recognitions(snapshot: Snapshot, user_id: str) -> list[RecognitionEvent]:
    return [r for r in snapshot.recognitions if r.receiver_id == user_id]


def user_redemptions(snapshot: Snapshot, user_id: str) -> list[RedemptionRecord]:
    return [r for r in snapshot.redemptions if r.user_id == user_id]


def given_recognitions(snapshot: Snapshot, user_id: str) -> list[RecognitionEvent]:
    return [r for r in snapshot.recognitions if r.giver_id == user_id]


def redemption_history(snapshot: Snapshot, user_id: str) -> list[RedemptionRecord]:
    """The user's redemptions, newest first; undated ones at the end."""
    redemptions = user_redemptions(snapshot, user_id)
    dated = [r for r in redemptions if r.timestamp is not None]
    undated = [r for r in redemptions if r.timestamp is None]
    return sorted(dated, key=lambda r: r.timestamp, reverse=True) + undated


def recognitions_by_month(received: list[RecognitionEvent]) -> list[MonthlyCount]:
    """Received recognitions per calendar month, oldest month first. Undated events are left out."""
    counts = Counter((r.timestamp.year, r.timestamp.month) for r in received if r.timestamp is not None)
    return [
        MonthlyCount(
            month=f"{year:04d}-{month:02d}",
            label=f"{MONTH_LABELS[month - 1]} '{year % 100:02d}",
            count=counts[(year, month)],
        )
        for year, month in sorted(counts)
    ]


def user_gross_points(snapshot: Snapshot, user: User, config: EngineConfig) -> int:
    # historical points always count, whatever screen asks
    received = len(received_recognitions(snapshot, user.id))
    return gross_points(received, user.historical_points, config.points_per_recognition)


def user_net_points(snapshot: Snapshot, user: User, config: EngineConfig) -> int:
    gross = user_gross_points(snapshot, user, config)
    return net_points(gross, user_redemptions(snapshot, user.id), snapshot.rewards)


def recognition_history(snapshot: Snapshot, user_id: str) -> list[RecognitionEvent]:
    """Received recognitions, newest first; undated ones at the end."""
    received = received_recognitions(snapshot, user_id)
    dated = [r for r in received if r.timestamp is not None]
    undated = [r for r in received if r.timestamp is None]
    return sorted(dated, key=lambda r: r.timestamp, reverse=True) + undated


def user_summary(snapshot: Snapshot, user_id: str, config: EngineConfig | None = None) -> UserSummaryOut:
    config = config or default_engine_config()
    user = find_user(snapshot, user_id)

    received = received_recognitions(snapshot, user.id)
    redemptions = redemption_history(snapshot, user.id)

    gross = gross_points(len(received), user.historical_points, config.points_per_recognition)
    net = net_points(gross, redemptions, snapshot.rewards)

    return UserSummaryOut(
        user_id=user.id,
        name=user.name,
        received_count=len(received),
        given_count=len(given_recognitions(snapshot, user.id)),
        historical_points=user.historical_points,
        gross_points=gross,
        net_points=net,
        level=config.level_table.level_for(gross),
        progress=progress_to_next(gross, config.level_table),
        badges=calculate_earned_badges(received, config.badges, config.badge_threshold),
        redemptions=redemptions,
        recognitions_by_month=recognitions_by_month(received),
    )
