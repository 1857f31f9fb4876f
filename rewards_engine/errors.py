class RewardsEngineError(Exception):
    """Base class for engine faults (not admission denials)."""


class LevelTableError(RewardsEngineError, ValueError):
    """The level table is empty or not monotonically increasing."""


class SnapshotLoadError(RewardsEngineError):
    """The raw snapshot could not be loaded from its source."""


class UserNotFound(RewardsEngineError, LookupError):
    def __init__(self, user_id: str):
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class RewardNotFound(RewardsEngineError, LookupError):
    def __init__(self, reward_id: str):
        super().__init__(f"Reward not found: {reward_id}")
        self.reward_id = reward_id


class SnapshotConflict(RewardsEngineError):
    """The snapshot kept being replaced while a redemption was being admitted."""
