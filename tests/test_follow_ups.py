# recordkeeper - Personal Records and Reminders
# Copyright (c) 2025-2026 Slash Daemon slashdaemon@protonmail.com
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 of the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Commercial licensing: [slashdaemon@protonmail.com]

"""Tests for the follow-up view."""

import sys
from datetime import date, datetime, time
from pathlib import Path

import pytest
import pytz

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from helpers import make_reminder
from reminders.follow_ups import build_follow_ups, filter_follow_ups, priority_for

UTC = pytz.UTC
# Wednesday; the week runs Sunday Oct 11 to Saturday Oct 17
NOW = UTC.localize(datetime(2026, 10, 14, 12, 0))

SCHEDULE = [
    ("past-week", date(2026, 10, 13), time(9, 0)),
    ("today-early", date(2026, 10, 14), time(9, 0)),
    ("today-late", date(2026, 10, 14), time(18, 0)),
    ("tomorrow", date(2026, 10, 15), time(10, 0)),
    ("friday", date(2026, 10, 16), time(10, 0)),
    ("later-month", date(2026, 10, 25), time(10, 0)),
    ("next-month", date(2026, 11, 2), time(10, 0)),
]


@pytest.fixture
def items():
    reminders = [
        make_reminder(day, at, reminder_id=reminder_id, title=reminder_id)
        for reminder_id, day, at in reversed(SCHEDULE)
    ]
    return build_follow_ups(reminders, NOW, UTC)


def ids(items):
    return [item.id for item in items]


class TestPriority:
    @pytest.mark.parametrize(
        "time_limit,expected",
        [
            ("5min", "high"),
            ("15min", "high"),
            ("30min", "medium"),
            ("1hour", "medium"),
            ("2hours", "low"),
            ("3day", "low"),
            ("nonsense", "medium"),
        ],
    )
    def test_priority_from_lead_time(self, time_limit, expected):
        reminder = make_reminder(date(2026, 10, 14), time(9, 0), time_limit)
        assert priority_for(reminder) == expected


class TestBuildFollowUps:
    def test_sorted_by_due(self, items):
        assert ids(items) == [reminder_id for reminder_id, _, _ in SCHEDULE]

    def test_status(self, items):
        statuses = {item.id: item.status for item in items}
        assert statuses["past-week"] == "overdue"
        assert statuses["today-early"] == "overdue"
        assert statuses["today-late"] == "pending"

    def test_default_description_uses_record_title(self):
        reminder = make_reminder(date(2026, 10, 20), time(9, 0), record_title="Passport")
        item = build_follow_ups([reminder], NOW, UTC)[0]
        assert item.description == "Reminder for: Passport"
        assert item.to_dict()["due_at"] == "2026-10-20T09:00:00+00:00"


class TestFilterFollowUps:
    def test_today(self, items):
        assert ids(filter_follow_ups(items, "today", NOW, UTC)) == ["today-early", "today-late"]

    def test_tomorrow(self, items):
        assert ids(filter_follow_ups(items, "tomorrow", NOW, UTC)) == ["tomorrow"]

    def test_this_week_excludes_today_and_tomorrow(self, items):
        assert ids(filter_follow_ups(items, "this-week", NOW, UTC)) == ["past-week", "friday"]

    def test_this_month_excludes_this_week(self, items):
        assert ids(filter_follow_ups(items, "this-month", NOW, UTC)) == ["later-month"]

    def test_overdue(self, items):
        assert ids(filter_follow_ups(items, "overdue", NOW, UTC)) == ["past-week", "today-early"]

    def test_all(self, items):
        assert len(filter_follow_ups(items, "all", NOW, UTC)) == len(SCHEDULE)

    def test_unknown_period(self, items):
        with pytest.raises(ValueError):
            filter_follow_ups(items, "someday", NOW, UTC)
