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

"""
Reminder Manager Module

Handles database operations for reminders.
"""

import logging
from datetime import date, datetime, time
from typing import Any, Optional

import asyncpg
import pytz

from store import rows_affected, store_errors

from .evaluator import local_today
from .models import REMINDER_COLUMNS, Reminder, ReminderValidationError, coerce_date, coerce_time
from .time_limit import InvalidLeadTime, parse_time_limit

logger = logging.getLogger("recordkeeper.reminders.manager")

# Fields a caller may change through update_reminder()
UPDATABLE_FIELDS = (
    "title",
    "description",
    "reminder_date",
    "reminder_time",
    "time_limit",
    "actions",
    "is_active",
    "record_id",
)


def _validate_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Check and normalize reminder fields before they reach the store."""
    cleaned = dict(fields)

    if "title" in cleaned:
        title = (cleaned["title"] or "").strip()
        if not title:
            raise ReminderValidationError("Reminder title is required")
        cleaned["title"] = title

    if "actions" in cleaned:
        actions = cleaned["actions"] or []
        if isinstance(actions, str) or not all(isinstance(a, str) for a in actions):
            raise ReminderValidationError("Reminder actions must be a list of strings")
        cleaned["actions"] = list(actions)

    try:
        if "reminder_date" in cleaned:
            cleaned["reminder_date"] = coerce_date(cleaned["reminder_date"])
        if "reminder_time" in cleaned:
            cleaned["reminder_time"] = coerce_time(cleaned["reminder_time"])
    except ValueError as e:
        raise ReminderValidationError(f"Invalid reminder date or time: {e}")

    if "time_limit" in cleaned:
        # Accepted as-is; unknown values degrade to the default lead time
        if isinstance(parse_time_limit(cleaned["time_limit"]), InvalidLeadTime):
            logger.warning(f"Saving reminder with unrecognized time limit '{cleaned['time_limit']}'")

    return cleaned


class ReminderManager:
    """
    Manages database operations for reminders.

    Provides methods to create, list, update and delete reminders, plus the
    scheduler-facing fetch of active reminders.
    """

    def __init__(self, db_pool: asyncpg.Pool, tz: Optional[pytz.BaseTzInfo] = None):
        """
        Initialize the reminder manager.

        Args:
            db_pool: asyncpg connection pool
            tz: Local timezone used to work out "today" (defaults to UTC)
        """
        self.db = db_pool
        self.tz = tz or pytz.UTC

    async def create_reminder(
        self,
        record_id: Any,
        title: str,
        reminder_date: date,
        reminder_time: time,
        time_limit: str = "1hour",
        actions: Optional[list[str]] = None,
        description: Optional[str] = None,
        is_active: bool = True,
    ) -> Reminder:
        """
        Create a new reminder.

        Args:
            record_id: ID of the record the reminder belongs to
            title: Reminder title
            reminder_date: Due date
            reminder_time: Due time of day
            time_limit: Lead-time specifier ("1hour", "45min", ...)
            actions: Action names to run when the reminder fires
            description: Optional description
            is_active: Initial active flag

        Returns:
            The stored reminder
        """
        fields = _validate_fields(
            {
                "title": title,
                "reminder_date": reminder_date,
                "reminder_time": reminder_time,
                "time_limit": time_limit,
                "actions": actions if actions is not None else ["Show browser notification"],
            }
        )

        with store_errors("create reminder"):
            row = await self.db.fetchrow(
                f"""
                INSERT INTO reminders (
                    record_id, title, description, reminder_date, reminder_time,
                    time_limit, actions, is_active
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                RETURNING {REMINDER_COLUMNS}
                """,
                record_id,
                fields["title"],
                description,
                fields["reminder_date"],
                fields["reminder_time"],
                fields["time_limit"],
                fields["actions"],
                is_active,
            )

        reminder = Reminder.from_row(row)
        logger.info(
            f"Created reminder {reminder.id} for record {record_id}: "
            f"due={reminder.reminder_date} {reminder.reminder_time}, lead={reminder.time_limit}"
        )
        return reminder

    async def get_reminder(self, reminder_id: Any) -> Optional[Reminder]:
        """
        Get a reminder by ID.

        Returns:
            Reminder or None if not found
        """
        with store_errors("get reminder"):
            row = await self.db.fetchrow(
                f"SELECT {REMINDER_COLUMNS} FROM reminders WHERE id = $1",
                reminder_id,
            )
        return Reminder.from_row(row) if row else None

    async def update_reminder(self, reminder_id: Any, **fields: Any) -> Optional[Reminder]:
        """
        Update any subset of a reminder's editable fields.

        Args:
            reminder_id: Reminder ID
            **fields: Columns from UPDATABLE_FIELDS

        Returns:
            The updated reminder, or None if it does not exist
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ReminderValidationError(f"Unknown reminder fields: {', '.join(sorted(unknown))}")
        if not fields:
            return await self.get_reminder(reminder_id)

        cleaned = _validate_fields(fields)
        names = [name for name in UPDATABLE_FIELDS if name in cleaned]
        assignments = ", ".join(f"{name} = ${i}" for i, name in enumerate(names, start=2))

        with store_errors("update reminder"):
            row = await self.db.fetchrow(
                f"""
                UPDATE reminders
                SET {assignments}, updated_at = NOW()
                WHERE id = $1
                RETURNING {REMINDER_COLUMNS}
                """,
                reminder_id,
                *[cleaned[name] for name in names],
            )

        if row is None:
            return None
        logger.info(f"Updated reminder {reminder_id}: {', '.join(names)}")
        return Reminder.from_row(row)

    async def delete_reminder(self, reminder_id: Any) -> bool:
        """
        Delete a reminder.

        Returns:
            True if deleted, False if not found
        """
        with store_errors("delete reminder"):
            result = await self.db.execute("DELETE FROM reminders WHERE id = $1", reminder_id)

        deleted = rows_affected(result) == 1
        if deleted:
            logger.info(f"Deleted reminder {reminder_id}")
        return deleted

    async def set_active(self, reminder_id: Any, is_active: bool) -> bool:
        """
        Set a reminder's active flag.

        Returns:
            True if a reminder was updated
        """
        with store_errors("set reminder active"):
            result = await self.db.execute(
                """
                UPDATE reminders
                SET is_active = $2, updated_at = NOW()
                WHERE id = $1
                """,
                reminder_id,
                is_active,
            )

        updated = rows_affected(result) == 1
        if updated:
            logger.info(f"Reminder {reminder_id} {'activated' if is_active else 'deactivated'}")
        return updated

    async def toggle_active(self, reminder_id: Any) -> Optional[bool]:
        """
        Flip a reminder's active flag.

        Returns:
            The new flag value, or None if the reminder does not exist
        """
        with store_errors("toggle reminder"):
            value = await self.db.fetchval(
                """
                UPDATE reminders
                SET is_active = NOT is_active, updated_at = NOW()
                WHERE id = $1
                RETURNING is_active
                """,
                reminder_id,
            )

        if value is not None:
            logger.info(f"Reminder {reminder_id} {'activated' if value else 'deactivated'}")
        return value

    async def mark_complete(self, reminder_id: Any) -> bool:
        """Mark a reminder (follow-up) as complete."""
        return await self.set_active(reminder_id, False)

    async def list_for_record(self, record_id: Any) -> list[Reminder]:
        """
        List all reminders attached to a record, soonest first.
        """
        with store_errors("list reminders for record"):
            rows = await self.db.fetch(
                f"""
                SELECT {REMINDER_COLUMNS} FROM reminders
                WHERE record_id = $1
                ORDER BY reminder_date ASC, reminder_time ASC
                """,
                record_id,
            )
        return [Reminder.from_row(row) for row in rows]

    async def count_active_for_record(self, record_id: Any) -> int:
        """Number of active reminders attached to a record."""
        with store_errors("count reminders"):
            count = await self.db.fetchval(
                """
                SELECT COUNT(*) FROM reminders
                WHERE record_id = $1 AND is_active = TRUE
                """,
                record_id,
            )
        return int(count or 0)

    async def get_upcoming(self, now: Optional[datetime] = None, limit: int = 10) -> list[Reminder]:
        """
        Get upcoming active reminders with their record's title and category.

        Args:
            now: Reference instant (defaults to the current time)
            limit: Maximum number of reminders

        Returns:
            Reminders ordered by date and time
        """
        today = local_today(now or datetime.now(pytz.UTC), self.tz)

        with store_errors("fetch upcoming reminders"):
            rows = await self.db.fetch(
                """
                SELECT r.id, r.record_id, r.title, r.description, r.reminder_date,
                       r.reminder_time, r.time_limit, r.actions, r.is_active,
                       r.created_by, r.created_at, r.updated_at,
                       rec.title AS record_title, c.name AS record_category
                FROM reminders r
                JOIN records rec ON rec.id = r.record_id
                LEFT JOIN categories c ON c.id = rec.category_id
                WHERE r.is_active = TRUE AND r.reminder_date >= $1
                ORDER BY r.reminder_date ASC, r.reminder_time ASC
                LIMIT $2
                """,
                today,
                limit,
            )

        return [Reminder.from_row(row) for row in rows]

    # =========================================================================
    # Scheduler-facing methods
    # =========================================================================

    async def fetch_active(self, now: datetime) -> list[Reminder]:
        """
        Get all active reminders due today or later.

        Args:
            now: Current instant; its local calendar date is "today"

        Returns:
            Reminders ordered by date and time

        Raises:
            StoreError: If the query fails
        """
        today = local_today(now, self.tz)

        with store_errors("fetch active reminders"):
            rows = await self.db.fetch(
                f"""
                SELECT {REMINDER_COLUMNS}
                FROM reminders
                WHERE is_active = TRUE AND reminder_date >= $1
                ORDER BY reminder_date ASC, reminder_time ASC
                """,
                today,
            )

        return [Reminder.from_row(row) for row in rows]
