import pytest

from conftest import make_redemption, make_reward
from rewards_engine.schemas.redemption import RedemptionStatus
from rewards_engine.services.scoring_service import gross_points, is_rejected, net_points, spent_points


REWARDS = [make_reward("rw-a", cost=300), make_reward("rw-b", cost=150), make_reward("rw-free", cost=0)]


def test_gross_points():
    assert gross_points(5) == 500
    assert gross_points(5, 250) == 750
    assert gross_points(0) == 0


def test_gross_points_keeps_negative_historical_balance():
    assert gross_points(1, -300) == -200


def test_gross_points_rejects_negative_count():
    with pytest.raises(ValueError):
        gross_points(-1)


def test_net_points_subtracts_non_rejected_costs():
    redemptions = [
        make_redemption("r1", "u", "rw-a", RedemptionStatus.APPROVED),
        make_redemption("r2", "u", "rw-b", RedemptionStatus.PENDING),
        make_redemption("r3", "u", "rw-b", RedemptionStatus.UNSPECIFIED),
    ]
    assert net_points(1000, redemptions, REWARDS) == 1000 - 300 - 150 - 150


def test_rejection_refunds_points():
    pending = [make_redemption("r1", "u", "rw-a", RedemptionStatus.PENDING)]
    rejected = [make_redemption("r1", "u", "rw-a", RedemptionStatus.REJECTED)]
    assert net_points(500, rejected, REWARDS) > net_points(500, pending, REWARDS)
    assert net_points(500, rejected, REWARDS) == 500


def test_rejecting_a_free_reward_keeps_net_equal():
    approved = [make_redemption("r1", "u", "rw-free", RedemptionStatus.APPROVED)]
    rejected = [make_redemption("r1", "u", "rw-free", RedemptionStatus.REJECTED)]
    assert net_points(500, approved, REWARDS) == net_points(500, rejected, REWARDS)


def test_net_never_exceeds_gross_without_rejections():
    for statuses in ([RedemptionStatus.APPROVED], [RedemptionStatus.PENDING] * 3, []):
        redemptions = [make_redemption(f"r{i}", "u", "rw-b", s) for i, s in enumerate(statuses)]
        assert net_points(400, redemptions, REWARDS) <= 400


def test_unknown_reward_costs_nothing(caplog):
    redemptions = [make_redemption("r1", "u", "missing")]
    with caplog.at_level("WARNING"):
        assert spent_points(redemptions, REWARDS) == 0
    assert "unknown reward" in caplog.text


@pytest.mark.parametrize(
    "status,expected",
    [
        (RedemptionStatus.REJECTED, True),
        (RedemptionStatus.PENDING, False),
        ("  Rechazado ", True),
        ("REJECTED", True),
        ("Aprobado", False),
        (None, False),
    ],
)
def test_is_rejected(status, expected):
    assert is_rejected(status) is expected
