import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone

from rewards_engine.errors import RewardNotFound, SnapshotLoadError, UserNotFound
from rewards_engine.schemas.recognition import RecognitionEvent
from rewards_engine.schemas.redemption import RedemptionRecord
from rewards_engine.schemas.reward import RewardDefinition
from rewards_engine.schemas.snapshot import Snapshot, SnapshotInfo
from rewards_engine.schemas.user import User


logger = logging.getLogger(__name__)


class KeyedLocks:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def get(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock


class SnapshotStore:
    """
    Holds the current raw snapshot.

    Readers take ``store.snapshot`` once and compute from it; the object they
    get is never mutated afterwards (appends replace it with a copy), so a
    reader always sees one consistent state. ``refresh`` swaps in a freshly
    loaded snapshot and bumps ``version``.
    """

    def __init__(self, source):
        self.source = source
        self._snapshot = Snapshot()
        self._state_lock = threading.RLock()
        self._user_locks = KeyedLocks()
        self._reward_locks = KeyedLocks()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    # ------------------------------------------------------------
    # Full reload
    # ------------------------------------------------------------
    def refresh(self) -> Snapshot:
        # load under the state lock so an append cannot land between the
        # source read and the swap
        with self._state_lock:
            try:
                loaded = self.source.load()
            except SnapshotLoadError:
                logger.exception("snapshot refresh failed, keeping previous snapshot")
                raise
            except Exception as e:
                logger.exception("snapshot refresh failed, keeping previous snapshot")
                raise SnapshotLoadError(str(e)) from e

            version = self._snapshot.version + 1
            self._snapshot = loaded.model_copy(
                update={"version": version, "loaded_at": loaded.loaded_at or datetime.now(timezone.utc)}
            )

        logger.info(
            "snapshot refreshed",
            extra={
                "version": version,
                "users": len(loaded.users),
                "recognitions": len(loaded.recognitions),
                "rewards": len(loaded.rewards),
                "redemptions": len(loaded.redemptions),
            },
        )
        return self._snapshot

    def info(self) -> SnapshotInfo:
        s = self._snapshot
        return SnapshotInfo(
            version=s.version,
            loaded_at=s.loaded_at,
            users=len(s.users),
            recognitions=len(s.recognitions),
            rewards=len(s.rewards),
            redemptions=len(s.redemptions),
        )

    # ------------------------------------------------------------
    # Collaborator interface
    # ------------------------------------------------------------
    def get_users(self) -> list[User]:
        return list(self._snapshot.users)

    def get_recognitions(self) -> list[RecognitionEvent]:
        return list(self._snapshot.recognitions)

    def get_rewards(self) -> list[RewardDefinition]:
        return list(self._snapshot.rewards)

    def get_redemptions(self) -> list[RedemptionRecord]:
        return list(self._snapshot.redemptions)

    def get_user(self, user_id: str) -> User:
        return find_user(self._snapshot, user_id)

    def get_reward(self, reward_id: str) -> RewardDefinition:
        return find_reward(self._snapshot, reward_id)

    # ------------------------------------------------------------
    # Redemption admission support
    # ------------------------------------------------------------
    @contextmanager
    def redemption_locks(self, user_id: str, reward_id: str):
        # always user then reward, so two admissions can never wait on each other
        with self._user_locks.get(user_id), self._reward_locks.get(reward_id):
            yield

    def append_redemption(self, record: RedemptionRecord, *, expected_version: int) -> bool:
        """
        Append ``record`` if the snapshot has not been reloaded since
        ``expected_version`` was read. Returns False on a version mismatch.
        """
        with self._state_lock:
            current = self._snapshot
            if current.version != expected_version:
                return False

            self.source.append_redemption(record)
            self._snapshot = current.model_copy(update={"redemptions": [*current.redemptions, record]})
            return True


def find_user(snapshot: Snapshot, user_id: str) -> User:
    for user in snapshot.users:
        if user.id == user_id:
            return user
    raise UserNotFound(user_id)


def find_reward(snapshot: Snapshot, reward_id: str) -> RewardDefinition:
    for reward in snapshot.rewards:
        if reward.id == reward_id:
            return reward
    raise RewardNotFound(reward_id)
