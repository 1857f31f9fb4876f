from datetime import datetime, timezone

from conftest import make_recognitions, make_redemption, make_reward, make_user
from rewards_engine.schemas.recognition import RecognitionEvent
from rewards_engine.schemas.redemption import RedemptionStatus
from rewards_engine.schemas.snapshot import Snapshot
from rewards_engine.services.summary_service import (
    recognitions_by_month,
    redemption_history,
    user_summary,
)


def _at(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


def test_recognitions_by_month_is_chronological():
    received = (
        make_recognitions("u", 2, start=_at(2024, 1, 30), prefix="jan")
        + make_recognitions("u", 1, start=_at(2023, 12, 5), prefix="dec")
        + make_recognitions("u", 3, start=_at(2024, 3, 1), prefix="mar")
        + [RecognitionEvent(id="x", giver_id="g", receiver_id="u", principle="Excelencia", timestamp=None)]
    )

    months = recognitions_by_month(received)

    # jan-1 lands on 31 Jan, the undated event is skipped
    assert [(m.month, m.label, m.count) for m in months] == [
        ("2023-12", "Dic '23", 1),
        ("2024-01", "Ene '24", 2),
        ("2024-03", "Mar '24", 3),
    ]


def test_recognitions_by_month_empty():
    assert recognitions_by_month([]) == []


def test_redemption_history_newest_first_undated_last():
    snapshot = Snapshot(
        redemptions=[
            make_redemption("old", "u", "rw", timestamp=_at(2024, 1, 1)),
            make_redemption("undated", "u", "rw", timestamp=None),
            make_redemption("new", "u", "rw", timestamp=_at(2024, 5, 1)),
            make_redemption("other-user", "v", "rw", timestamp=_at(2024, 6, 1)),
            make_redemption("mid", "u", "rw", RedemptionStatus.REJECTED, timestamp=_at(2024, 3, 1)),
        ]
    )
    assert [r.id for r in redemption_history(snapshot, "u")] == ["new", "mid", "old", "undated"]


def test_user_summary_counts_given_and_received():
    snapshot = Snapshot(
        users=[make_user("a"), make_user("b")],
        recognitions=(
            make_recognitions("a", 2, giver_id="b")
            + make_recognitions("b", 3, giver_id="a", prefix="from-a")
            + make_recognitions("b", 1, giver_id="c", prefix="from-c")
        ),
        rewards=[make_reward("rw", cost=100, stock=5)],
        redemptions=[
            make_redemption("r1", "b", "rw", timestamp=_at(2024, 1, 1)),
            make_redemption("r2", "b", "rw", RedemptionStatus.PENDING, timestamp=_at(2024, 4, 1)),
        ],
    )

    a = user_summary(snapshot, "a")
    assert a.received_count == 2
    assert a.given_count == 3

    b = user_summary(snapshot, "b")
    assert b.received_count == 4
    assert b.given_count == 2
    assert b.net_points == 400 - 200
    assert [r.id for r in b.redemptions] == ["r2", "r1"]
    assert [(m.month, m.count) for m in b.recognitions_by_month] == [("2024-03", 4)]
