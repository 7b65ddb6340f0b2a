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

"""Tests for reminder store access."""

import sys
from datetime import date, datetime, time
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytz

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reminders.manager import ReminderManager
from reminders.models import Reminder, ReminderValidationError
from reminders.time_limit import CustomLeadTime, InvalidLeadTime
from store import StoreError, rows_affected


def reminder_row(**overrides):
    row = {
        "id": "rem-1",
        "record_id": "rec-1",
        "title": "Renew passport",
        "description": None,
        "reminder_date": date(2026, 3, 5),
        "reminder_time": time(9, 30),
        "time_limit": "1hour",
        "actions": ["Show browser notification"],
        "is_active": True,
        "created_by": None,
        "created_at": None,
        "updated_at": None,
    }
    row.update(overrides)
    return row


@pytest.fixture
def pool():
    db = MagicMock()
    db.fetch = AsyncMock(return_value=[])
    db.fetchrow = AsyncMock(return_value=None)
    db.fetchval = AsyncMock(return_value=None)
    db.execute = AsyncMock(return_value="UPDATE 1")
    return db


class TestReminderFromRow:
    """Test building reminders from rows."""

    def test_lead_time_resolved_on_load(self):
        reminder = Reminder.from_row(reminder_row(time_limit="45min"))
        assert reminder.lead_time == CustomLeadTime(unit="min", amount=45)

    def test_string_date_and_time(self):
        reminder = Reminder.from_row(reminder_row(reminder_date="2026-03-05", reminder_time="09:30:00"))
        assert reminder.reminder_date == date(2026, 3, 5)
        assert reminder.reminder_time == time(9, 30)

    def test_missing_time_limit_is_invalid(self):
        reminder = Reminder.from_row(reminder_row(time_limit=None))
        assert isinstance(reminder.lead_time, InvalidLeadTime)

    def test_null_actions(self):
        assert Reminder.from_row(reminder_row(actions=None)).actions == []

    def test_to_dict(self):
        data = Reminder.from_row(reminder_row()).to_dict()
        assert data["reminder_date"] == "2026-03-05"
        assert data["reminder_time"] == "09:30"
        assert data["record_id"] == "rec-1"


class TestFetchActive:
    """Test the scheduler-facing fetch."""

    @pytest.mark.asyncio
    async def test_filters_from_local_today(self, pool):
        tz = pytz.timezone("America/New_York")
        manager = ReminderManager(pool, tz=tz)
        # 02:00 UTC on the 6th is still the 5th in New York
        now = pytz.UTC.localize(datetime(2026, 3, 6, 2, 0))

        await manager.fetch_active(now)

        query, today = pool.fetch.await_args.args
        assert today == date(2026, 3, 5)
        assert "is_active = TRUE" in query
        assert "ORDER BY reminder_date ASC, reminder_time ASC" in query

    @pytest.mark.asyncio
    async def test_returns_reminders(self, pool):
        pool.fetch.return_value = [reminder_row(), reminder_row(id="rem-2", time_limit="bogus")]
        manager = ReminderManager(pool)

        reminders = await manager.fetch_active(pytz.UTC.localize(datetime(2026, 3, 5, 8, 0)))

        assert [r.id for r in reminders] == ["rem-1", "rem-2"]
        assert isinstance(reminders[1].lead_time, InvalidLeadTime)

    @pytest.mark.asyncio
    async def test_driver_failure_becomes_store_error(self, pool):
        pool.fetch.side_effect = ConnectionRefusedError("connection refused")
        manager = ReminderManager(pool)

        with pytest.raises(StoreError) as exc_info:
            await manager.fetch_active(pytz.UTC.localize(datetime(2026, 3, 5, 8, 0)))

        assert exc_info.value.kind == "ConnectionRefusedError"
        assert "connection refused" in exc_info.value.message


class TestReminderCrud:
    """Test create/update/delete."""

    @pytest.mark.asyncio
    async def test_create_defaults(self, pool):
        pool.fetchrow.return_value = reminder_row()
        manager = ReminderManager(pool)

        reminder = await manager.create_reminder(
            "rec-1", "  Renew passport ", "2026-03-05", "09:30"
        )

        args = pool.fetchrow.await_args.args
        assert args[1:] == (
            "rec-1",
            "Renew passport",
            None,
            date(2026, 3, 5),
            time(9, 30),
            "1hour",
            ["Show browser notification"],
            True,
        )
        assert reminder.id == "rem-1"

    @pytest.mark.asyncio
    async def test_create_requires_title(self, pool):
        manager = ReminderManager(pool)
        with pytest.raises(ReminderValidationError):
            await manager.create_reminder("rec-1", "   ", date(2026, 3, 5), time(9, 30))
        pool.fetchrow.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_rejects_bad_date(self, pool):
        manager = ReminderManager(pool)
        with pytest.raises(ReminderValidationError):
            await manager.create_reminder("rec-1", "Title", "not-a-date", time(9, 30))

    @pytest.mark.asyncio
    async def test_create_rejects_string_actions(self, pool):
        manager = ReminderManager(pool)
        with pytest.raises(ReminderValidationError):
            await manager.create_reminder(
                "rec-1", "Title", date(2026, 3, 5), time(9, 30), actions="Send email"
            )

    @pytest.mark.asyncio
    async def test_create_accepts_unknown_time_limit(self, pool):
        pool.fetchrow.return_value = reminder_row(time_limit="soonish")
        manager = ReminderManager(pool)

        reminder = await manager.create_reminder(
            "rec-1", "Title", date(2026, 3, 5), time(9, 30), time_limit="soonish"
        )

        assert reminder.time_limit == "soonish"
        assert isinstance(reminder.lead_time, InvalidLeadTime)

    @pytest.mark.asyncio
    async def test_update_builds_set_clause(self, pool):
        pool.fetchrow.return_value = reminder_row(title="New title", time_limit="2hours")
        manager = ReminderManager(pool)

        reminder = await manager.update_reminder("rem-1", time_limit="2hours", title="New title")

        query, *args = pool.fetchrow.await_args.args
        assert "SET title = $2, time_limit = $3, updated_at = NOW()" in query
        assert args == ["rem-1", "New title", "2hours"]
        assert reminder.title == "New title"

    @pytest.mark.asyncio
    async def test_update_unknown_field(self, pool):
        manager = ReminderManager(pool)
        with pytest.raises(ReminderValidationError, match="created_by"):
            await manager.update_reminder("rem-1", created_by="someone")

    @pytest.mark.asyncio
    async def test_update_missing_reminder(self, pool):
        manager = ReminderManager(pool)
        assert await manager.update_reminder("missing", title="x") is None

    @pytest.mark.asyncio
    async def test_delete(self, pool):
        manager = ReminderManager(pool)
        pool.execute.return_value = "DELETE 1"
        assert await manager.delete_reminder("rem-1") is True
        pool.execute.return_value = "DELETE 0"
        assert await manager.delete_reminder("rem-1") is False

    @pytest.mark.asyncio
    async def test_toggle_active(self, pool):
        pool.fetchval.return_value = False
        manager = ReminderManager(pool)
        assert await manager.toggle_active("rem-1") is False
        assert "NOT is_active" in pool.fetchval.await_args.args[0]

    @pytest.mark.asyncio
    async def test_toggle_missing(self, pool):
        manager = ReminderManager(pool)
        assert await manager.toggle_active("missing") is None

    @pytest.mark.asyncio
    async def test_mark_complete_deactivates(self, pool):
        manager = ReminderManager(pool)
        assert await manager.mark_complete("rem-1") is True
        assert pool.execute.await_args.args[1:] == ("rem-1", False)

    @pytest.mark.asyncio
    async def test_count_active(self, pool):
        pool.fetchval.return_value = 3
        manager = ReminderManager(pool)
        assert await manager.count_active_for_record("rec-1") == 3

    @pytest.mark.asyncio
    async def test_upcoming_includes_record_fields(self, pool):
        pool.fetch.return_value = [
            reminder_row(record_title="Passport", record_category="Travel"),
        ]
        manager = ReminderManager(pool)

        reminders = await manager.get_upcoming(pytz.UTC.localize(datetime(2026, 3, 1)), limit=5)

        assert reminders[0].record_title == "Passport"
        assert reminders[0].record_category == "Travel"
        assert pool.fetch.await_args.args[1:] == (date(2026, 3, 1), 5)


class TestRowsAffected:
    def test_parses_status(self):
        assert rows_affected("UPDATE 3") == 3
        assert rows_affected("DELETE 0") == 0

    def test_garbage(self):
        assert rows_affected(None) == 0
        assert rows_affected("") == 0
