from rewards_engine.constants import LEVELS, MAX_LEVEL_NAME
from rewards_engine.errors import LevelTableError
from rewards_engine.schemas.level import LevelEntry, LevelProgress


def _validate_levels(entries: list[LevelEntry]):
    if not entries:
        raise LevelTableError("Invalid level table: at least one level is required")

    first = entries[0]
    if first.level != 0 or first.required_points != 0:
        raise LevelTableError("Invalid level table: first level must be level 0 with required_points=0")

    for prev, cur in zip(entries, entries[1:]):
        if cur.level <= prev.level:
            raise LevelTableError("Invalid level table: levels must strictly increase")
        if cur.required_points <= prev.required_points:
            raise LevelTableError(
                "Invalid level table: required_points must strictly increase as level increases"
            )


class LevelTable:
    """
    Ordered level thresholds by gross points.

    Validated once at construction; a broken table is a configuration error
    and never reaches per-call code.
    """

    def __init__(self, entries):
        levels = [e if isinstance(e, LevelEntry) else LevelEntry(**e) for e in entries]
        _validate_levels(levels)
        self._entries = tuple(levels)
        self._by_level = {e.level: e for e in levels}

    @property
    def entries(self) -> tuple[LevelEntry, ...]:
        return self._entries

    @property
    def max_level(self) -> LevelEntry:
        return self._entries[-1]

    def level_for(self, points: int) -> LevelEntry:
        current = self._entries[0]
        for entry in self._entries:
            if points >= entry.required_points:
                current = entry
            else:
                break
        return current

    def next_level_after(self, level: int) -> LevelEntry | None:
        # tables may skip level numbers, so take the first one above
        if level + 1 in self._by_level:
            return self._by_level[level + 1]
        for entry in self._entries:
            if entry.level > level:
                return entry
        return None


DEFAULT_LEVEL_TABLE = LevelTable(LEVELS)


# ============================================================
# Progress toward the next level
# ============================================================
def progress_to_next(total_points: int, table: LevelTable = DEFAULT_LEVEL_TABLE) -> LevelProgress:
    current = table.level_for(total_points)
    nxt = table.next_level_after(current.level)

    if nxt is None:
        return LevelProgress(percentage=100.0, points_needed=0, next_level_name=MAX_LEVEL_NAME)

    span = nxt.required_points - current.required_points
    if span <= 0:
        return LevelProgress(percentage=100.0, points_needed=0, next_level_name=nxt.name)

    percentage = 100.0 * (total_points - current.required_points) / span
    percentage = min(max(percentage, 0.0), 100.0)
    needed = max(nxt.required_points - total_points, 0)

    return LevelProgress(percentage=percentage, points_needed=needed, next_level_name=nxt.name)
