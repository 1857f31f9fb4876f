from collections import Counter

from rewards_engine.constants import LEADERBOARD_SIZE, TOP_RECOGNIZED_SIZE
from rewards_engine.schemas.snapshot import Snapshot
from rewards_engine.schemas.summary import AdminStatsOut, LeaderboardEntry, PrincipleCount, TopRecognized
from rewards_engine.schemas.user import UserRole, UserStatus
from rewards_engine.services.engine_config import EngineConfig, default_engine_config
from rewards_engine.services.scoring_service import gross_points


def leaderboard(snapshot: Snapshot, limit: int = LEADERBOARD_SIZE, config: EngineConfig | None = None) -> list[LeaderboardEntry]:
    """Active non-admin users ranked by gross points."""
    config = config or default_engine_config()
    received = Counter(r.receiver_id for r in snapshot.recognitions)

    ranked = []
    for user in snapshot.users:
        if user.role == UserRole.ADMIN or user.status != UserStatus.ACTIVE:
            continue
        points = gross_points(received[user.id], user.historical_points, config.points_per_recognition)
        ranked.append((user, points))

    # stable sort keeps snapshot order between equal scores
    ranked.sort(key=lambda item: item[1], reverse=True)

    return [
        LeaderboardEntry(position=idx, user_id=user.id, name=user.name, points=points)
        for idx, (user, points) in enumerate(ranked[: max(limit, 0)], start=1)
    ]


def admin_stats(snapshot: Snapshot, top: int = TOP_RECOGNIZED_SIZE) -> AdminStatsOut:
    names = {u.id: u.name for u in snapshot.users}
    received = Counter(r.receiver_id for r in snapshot.recognitions)
    principles = Counter(r.principle for r in snapshot.recognitions)

    return AdminStatsOut(
        active_users=sum(1 for u in snapshot.users if u.status == UserStatus.ACTIVE),
        total_recognitions=len(snapshot.recognitions),
        total_redemptions=len(snapshot.redemptions),
        top_recognized=[
            TopRecognized(user_id=user_id, name=names.get(user_id), count=count)
            for user_id, count in received.most_common(max(top, 0))
        ],
        principles=[PrincipleCount(principle=p, count=c) for p, c in principles.items()],
    )
