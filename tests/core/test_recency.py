"""
Test suite for recency grouping.

System role: Verification of history sidebar buckets
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from gyanmitra.core.recency import RecencyBucket, bucket_for, group_by_recency

IST = timezone(timedelta(hours=5, minutes=30))
NOW = datetime(2024, 3, 10, 0, 10, tzinfo=IST)


class TestBucketFor:
    """Test suite for bucket_for."""

    def test_late_yesterday_should_not_count_as_today(self) -> None:
        # 23:50 the previous evening is 20 minutes ago but a different calendar day.
        moment = datetime(2024, 3, 9, 23, 50, tzinfo=IST)

        assert bucket_for(moment, NOW, IST) == RecencyBucket.YESTERDAY

    def test_same_day_should_be_today(self) -> None:
        assert bucket_for(datetime(2024, 3, 10, 0, 1, tzinfo=IST), NOW, IST) == RecencyBucket.TODAY

    def test_future_timestamp_should_be_today(self) -> None:
        assert bucket_for(NOW + timedelta(hours=5), NOW, IST) == RecencyBucket.TODAY

    def test_seven_days_boundary(self) -> None:
        seven_days = datetime(2024, 3, 3, 0, 0, tzinfo=IST)
        eight_days = datetime(2024, 3, 2, 23, 59, tzinfo=IST)

        assert bucket_for(seven_days, NOW, IST) == RecencyBucket.LAST_7_DAYS
        assert bucket_for(eight_days, NOW, IST) == RecencyBucket.OLDER

    def test_naive_timestamps_should_be_read_as_utc(self) -> None:
        # 18:45 UTC on the 9th is 00:15 IST on the 10th.
        moment = datetime(2024, 3, 9, 18, 45)

        assert bucket_for(moment, NOW, IST) == RecencyBucket.TODAY


class TestGroupByRecency:
    def test_should_include_every_bucket_and_keep_order(self) -> None:
        items = [
            SimpleNamespace(name="a", updated_at=datetime(2024, 3, 10, 0, 5, tzinfo=IST)),
            SimpleNamespace(name="b", updated_at=datetime(2024, 1, 1, tzinfo=IST)),
            SimpleNamespace(name="c", updated_at=datetime(2024, 3, 10, 0, 2, tzinfo=IST)),
        ]

        groups = group_by_recency(items, now=NOW, tz=IST)

        assert list(groups) == list(RecencyBucket)
        assert [i.name for i in groups[RecencyBucket.TODAY]] == ["a", "c"]
        assert groups[RecencyBucket.YESTERDAY] == []
        assert [i.name for i in groups[RecencyBucket.OLDER]] == ["b"]
