"""
Recency grouping for conversation history.

Buckets items by local calendar day relative to "now": Today, Yesterday,
Last 7 Days (on or after local midnight seven days before today), Older.
Pure function; the caller supplies the clock and the timezone.

Dependencies: None (pure domain layer)
System role: History sidebar grouping
"""

from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")


class RecencyBucket(str, Enum):
    """History groups, in display order."""

    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7_DAYS = "last_7_days"
    OLDER = "older"


def _local(moment: datetime, tz: tzinfo) -> datetime:
    # Naive datetimes are stored UTC.
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz)


def bucket_for(moment: datetime, now: datetime, tz: tzinfo) -> RecencyBucket:
    """Classify one timestamp against ``now`` in timezone ``tz``."""
    today = _local(now, tz).date()
    day = _local(moment, tz).date()

    if day >= today:
        return RecencyBucket.TODAY
    if day == today - timedelta(days=1):
        return RecencyBucket.YESTERDAY
    if day >= today - timedelta(days=7):
        return RecencyBucket.LAST_7_DAYS
    return RecencyBucket.OLDER


def group_by_recency(
    items: Iterable[T],
    now: datetime | None = None,
    tz: tzinfo | None = None,
    key: Callable[[T], datetime] = lambda item: item.updated_at,
) -> dict[RecencyBucket, list[T]]:
    """
    Group items into recency buckets.

    Every bucket is present in the result, in display order, and items keep
    their input order within a bucket. Timestamps in the future count as
    Today.

    Args:
        items: Items to group (e.g. conversation previews)
        now: Reference time, defaults to the current time
        tz: Calendar timezone, defaults to UTC
        key: Extracts the timestamp to classify, defaults to ``updated_at``

    Returns:
        dict: Bucket -> items
    """
    tz = tz or timezone.utc
    now = now or datetime.now(tz)

    groups: dict[RecencyBucket, list[T]] = {bucket: [] for bucket in RecencyBucket}
    for item in items:
        groups[bucket_for(key(item), now, tz)].append(item)
    return groups
