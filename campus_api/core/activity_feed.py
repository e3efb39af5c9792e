"""Activity Feed — pure merge of heterogeneous dashboard events.

Invariants:
    - merge_activities is PURE: no IO, inputs are never mutated
    - Output is sorted non-increasing by timestamp
    - Ties keep their input order (list.sort is stable, reverse=True included)
    - Output length never exceeds the requested limit
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from campus_api.core.domain_types import ActivityType


ADMIN_FEED_LIMIT: int = 10
MODERATOR_FEED_LIMIT: int = 10
PERSONAL_FEED_LIMIT: int = 5

CA_WELCOME_MESSAGE = (
    "Welcome to CA Dashboard - Start assigning tasks to engage "
    "with your college community!"
)
USER_WELCOME_MESSAGE = (
    "Welcome to your dashboard! Start participating in tasks to earn points."
)


@dataclass(frozen=True)
class Activity:
    """One feed entry."""
    type: ActivityType
    message: str
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


def merge_activities(*streams: Iterable[Activity], limit: int) -> list[Activity]:
    """Concatenate streams, sort newest first, keep the first `limit` entries."""
    merged = [activity for stream in streams for activity in stream]
    merged.sort(key=lambda a: a.timestamp, reverse=True)
    return merged[:limit]


def feed_or_welcome(
    activities: list[Activity], welcome_type: ActivityType, welcome_message: str,
    limit: int = PERSONAL_FEED_LIMIT, now: datetime | None = None,
) -> list[Activity]:
    """Personal feeds fall back to a single synthetic welcome entry when empty."""
    if activities:
        return merge_activities(activities, limit=limit)
    return [
        Activity(
            type=welcome_type,
            message=welcome_message,
            timestamp=now or datetime.now(timezone.utc),
        ),
    ]
