"""Tests for the activity statistics aggregations."""
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from app.schemas.activity_log import ActivityStatRow, AdminAction
from app.services import activity_stats

JAKARTA = ZoneInfo("Asia/Jakarta")
NOW = datetime(2026, 10, 19, 14, 30, tzinfo=JAKARTA)


def _row(i, when, action, table="fasilitas"):
    return ActivityStatRow(id=f"r{i}", created_at=when, action=action, target_table=table)


def _twelve_rows():
    """5 CREATE, 4 UPDATE, 3 DELETE spread over the last 7 days."""
    actions = ["CREATE"] * 5 + ["UPDATE"] * 4 + ["DELETE"] * 3
    tables = ["fasilitas", "programs", "kegiatan"]
    rows = []
    for i, action in enumerate(actions):
        when = NOW - timedelta(days=i % 7, hours=1)
        rows.append(_row(i, when.astimezone(timezone.utc), action, tables[i % 3]))
    return rows


class TestWindowStart:
    def test_midnight_days_ago_in_display_timezone(self):
        start = activity_stats.window_start_for(7, now=NOW, tz=JAKARTA)
        assert start == datetime(2026, 10, 12, 0, 0, tzinfo=JAKARTA)

    def test_converts_utc_now_to_local_day(self):
        # 20:00 UTC is already the next day in Jakarta
        now_utc = datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)
        start = activity_stats.window_start_for(30, now=now_utc, tz=JAKARTA)
        assert start.date() == date(2026, 9, 19)
        assert start.hour == 0


class TestDailyCounts:
    def test_every_day_present_with_zero_fill(self):
        start = activity_stats.window_start_for(7, now=NOW, tz=JAKARTA)
        rows = [_row(1, NOW - timedelta(days=2), "CREATE")]

        buckets = activity_stats.daily_counts(rows, start, NOW.date(), JAKARTA)

        assert len(buckets) == 8
        assert buckets[0].day == date(2026, 10, 12)
        assert buckets[-1].day == date(2026, 10, 19)
        assert buckets[0].label == "12/10"
        assert [b.count for b in buckets] == [0, 0, 0, 0, 0, 1, 0, 0]

    def test_buckets_by_local_calendar_day(self):
        start = activity_stats.window_start_for(7, now=NOW, tz=JAKARTA)
        # 18:30 UTC on the 18th is 01:30 on the 19th in Jakarta
        late = datetime(2026, 10, 18, 18, 30, tzinfo=timezone.utc)

        buckets = activity_stats.daily_counts([_row(1, late, "UPDATE")], start, NOW.date(), JAKARTA)

        assert buckets[-1].day == date(2026, 10, 19)
        assert buckets[-1].count == 1

    def test_counts_sum_to_total(self):
        rows = _twelve_rows()
        start = activity_stats.window_start_for(7, now=NOW, tz=JAKARTA)
        buckets = activity_stats.daily_counts(rows, start, NOW.date(), JAKARTA)
        assert sum(b.count for b in buckets) == 12


class TestDistributions:
    def test_action_distribution_sorted_by_count(self):
        dist = activity_stats.action_distribution(_twelve_rows())
        assert [(d.action, d.count) for d in dist] == [
            (AdminAction.CREATE, 5),
            (AdminAction.UPDATE, 4),
            (AdminAction.DELETE, 3),
        ]

    def test_table_distribution_ties_broken_by_name(self):
        rows = [
            _row(1, NOW, "CREATE", "programs"),
            _row(2, NOW, "CREATE", "fasilitas"),
            _row(3, NOW, "UPDATE", "kegiatan"),
            _row(4, NOW, "UPDATE", "kegiatan"),
        ]
        dist = activity_stats.table_distribution(rows)
        assert [(d.table, d.count) for d in dist] == [
            ("kegiatan", 2),
            ("fasilitas", 1),
            ("programs", 1),
        ]

    def test_empty_input(self):
        assert activity_stats.action_distribution([]) == []
        assert activity_stats.table_distribution([]) == []


def test_summarize_twelve_entries():
    rows = _twelve_rows()
    start = activity_stats.window_start_for(7, now=NOW, tz=JAKARTA)

    summary = activity_stats.summarize(rows, 7, start, now=NOW, tz=JAKARTA)

    assert summary.total == 12
    assert summary.range_days == 7
    assert {a.action: a.count for a in summary.actions} == {
        AdminAction.CREATE: 5,
        AdminAction.UPDATE: 4,
        AdminAction.DELETE: 3,
    }
    assert sum(t.count for t in summary.tables) == 12
    assert len(summary.daily) == 8
