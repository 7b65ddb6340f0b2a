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

"""Reminder data model."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Mapping, Optional

from .time_limit import LeadTime, parse_time_limit

# Columns selected for every reminder read
REMINDER_COLUMNS = """
    id, record_id, title, description, reminder_date, reminder_time,
    time_limit, actions, is_active, created_by, created_at, updated_at
"""


class ReminderValidationError(ValueError):
    """Raised when reminder fields are missing or malformed."""

    pass


def coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def coerce_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value))


@dataclass
class Reminder:
    """A reminder row, with its time_limit resolved once at load time."""

    id: Any
    record_id: Any
    title: str
    reminder_date: date
    reminder_time: time
    time_limit: str
    lead_time: LeadTime
    description: Optional[str] = None
    actions: list[str] = field(default_factory=list)
    is_active: bool = True
    created_by: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Present on joined reads only
    record_title: Optional[str] = None
    record_category: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Reminder":
        """
        Build a Reminder from an asyncpg Record or dict.

        Args:
            row: Mapping with the reminders table columns

        Returns:
            Reminder instance
        """
        time_limit = row.get("time_limit") or ""
        return cls(
            id=row["id"],
            record_id=row.get("record_id"),
            title=row["title"],
            description=row.get("description"),
            reminder_date=coerce_date(row["reminder_date"]),
            reminder_time=coerce_time(row["reminder_time"]),
            time_limit=time_limit,
            lead_time=parse_time_limit(time_limit),
            actions=list(row.get("actions") or []),
            is_active=bool(row.get("is_active", True)),
            created_by=row.get("created_by"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            record_title=row.get("record_title"),
            record_category=row.get("record_category"),
        )

    def to_dict(self) -> dict:
        """Plain representation for tool output and logs."""
        return {
            "id": str(self.id),
            "record_id": str(self.record_id) if self.record_id is not None else None,
            "title": self.title,
            "description": self.description,
            "reminder_date": self.reminder_date.isoformat(),
            "reminder_time": self.reminder_time.strftime("%H:%M"),
            "time_limit": self.time_limit,
            "actions": list(self.actions),
            "is_active": self.is_active,
        }
