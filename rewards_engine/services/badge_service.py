from datetime import datetime, timezone
from typing import Iterable

from rewards_engine.constants import BADGE_DEFINITIONS, BADGE_THRESHOLD
from rewards_engine.schemas.badge import BadgeDefinition, EarnedBadge
from rewards_engine.schemas.recognition import RecognitionEvent


DEFAULT_BADGES = [BadgeDefinition(**b) for b in BADGE_DEFINITIONS]

_UNDATED = datetime.max.replace(tzinfo=timezone.utc)


def _event_sort_key(event: RecognitionEvent):
    # undated events go last, ties keep input order (sorted is stable)
    return event.timestamp if event.timestamp is not None else _UNDATED


def calculate_earned_badges(
    received: Iterable[RecognitionEvent],
    definitions: Iterable[BadgeDefinition] = DEFAULT_BADGES,
    threshold: int = BADGE_THRESHOLD,
) -> list[EarnedBadge]:
    """
    One entry per badge definition, in definition order.

    A badge is earned once the user has received ``threshold`` recognitions
    of its principle; the earn date is the timestamp of the threshold-th
    such recognition in chronological order, so it does not move when more
    recognitions arrive later.
    """
    if threshold < 1:
        raise ValueError("threshold must be >= 1")

    by_principle: dict[str, list[RecognitionEvent]] = {}
    for event in received:
        by_principle.setdefault(event.principle, []).append(event)

    badges = []
    for definition in definitions:
        relevant = by_principle.get(definition.principle, [])
        count = len(relevant)
        earned = count >= threshold

        earned_date = None
        if earned:
            ordered = sorted(relevant, key=_event_sort_key)
            earned_date = ordered[threshold - 1].timestamp

        badges.append(
            EarnedBadge(
                name=definition.name,
                principle=definition.principle,
                description=definition.description,
                count=count,
                earned=earned,
                earned_date=earned_date,
            )
        )

    return badges
