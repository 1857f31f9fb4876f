from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from rewards_engine.main import create_app
from rewards_engine.schemas.recognition import RecognitionEvent
from rewards_engine.schemas.redemption import RedemptionRecord, RedemptionStatus
from rewards_engine.schemas.reward import RewardDefinition
from rewards_engine.schemas.user import User, UserRole, UserStatus
from rewards_engine.services.engine_config import default_engine_config
from rewards_engine.services.snapshot_service import SnapshotStore
from rewards_engine.services.snapshot_sources import InMemorySource


BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_user(user_id="u-1", *, historical_points=0, role=UserRole.CONTRIBUTOR, status=UserStatus.ACTIVE, name=None):
    return User(
        id=user_id,
        name=name or f"User {user_id}",
        email=f"{user_id}@example.com",
        status=status,
        role=role,
        historical_points=historical_points,
    )


def make_recognitions(receiver_id, count, *, principle="Innovación", giver_id="giver", start=BASE_TIME, prefix=None):
    prefix = prefix or f"app-{receiver_id}-{principle}"
    return [
        RecognitionEvent(
            id=f"{prefix}-{i}",
            giver_id=giver_id,
            receiver_id=receiver_id,
            principle=principle,
            reason="Gran trabajo",
            timestamp=start + timedelta(days=i),
        )
        for i in range(count)
    ]


def make_reward(reward_id="rw-1", *, cost=300, stock=1, required_level=0):
    return RewardDefinition(
        id=reward_id,
        name=f"Reward {reward_id}",
        description="",
        required_level=required_level,
        initial_stock=stock,
        point_cost=cost,
    )


def make_redemption(redemption_id, user_id, reward_id, status=RedemptionStatus.APPROVED, *, timestamp=BASE_TIME):
    return RedemptionRecord(
        id=redemption_id,
        user_id=user_id,
        reward_id=reward_id,
        timestamp=timestamp,
        status=status,
    )


@pytest.fixture
def engine_config():
    return default_engine_config()


@pytest.fixture
def source():
    return InMemorySource(
        users=[
            make_user("u-1"),
            make_user("u-2", historical_points=150),
            make_user("admin", role=UserRole.ADMIN),
            make_user("gone", status=UserStatus.INACTIVE, historical_points=900),
        ],
        recognitions=[
            *make_recognitions("u-1", 3, principle="Innovación"),
            *make_recognitions("u-1", 2, principle="Excelencia"),
            *make_recognitions("u-2", 1, principle="Integridad"),
        ],
        rewards=[
            make_reward("rw-cheap", cost=100, stock=10),
            make_reward("rw-last", cost=300, stock=1),
            make_reward("rw-vip", cost=100, stock=5, required_level=5),
        ],
        redemptions=[
            make_redemption("red-1", "u-2", "rw-cheap", RedemptionStatus.APPROVED),
            make_redemption("red-2", "u-1", "rw-cheap", RedemptionStatus.REJECTED),
        ],
    )


@pytest.fixture
def store(source):
    s = SnapshotStore(source)
    s.refresh()
    return s


@pytest.fixture
def client(store, engine_config):
    app = create_app(store=store, engine_config=engine_config)
    with TestClient(app) as c:
        yield c
