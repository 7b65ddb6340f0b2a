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
Follow-up View

Turns upcoming reminders into follow-up items (pending or overdue, with a
priority derived from the lead time) and filters them by period.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

import pytz

from .evaluator import due_instant, localize
from .models import Reminder

HIGH_PRIORITY_LEAD = timedelta(minutes=15)
MEDIUM_PRIORITY_LEAD = timedelta(hours=1)

FOLLOW_UP_PERIODS = ("today", "tomorrow", "this-week", "this-month", "overdue", "all")


@dataclass
class FollowUpItem:
    """A reminder as shown on the follow-up dashboard."""

    id: Any
    title: str
    description: str
    due_at: datetime
    priority: str  # high / medium / low
    status: str  # pending / overdue
    record_id: Optional[Any] = None

    @property
    def is_overdue(self) -> bool:
        return self.status == "overdue"

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "due_at": self.due_at.isoformat(),
            "priority": self.priority,
            "status": self.status,
            "record_id": str(self.record_id) if self.record_id is not None else None,
        }


def priority_for(reminder: Reminder) -> str:
    """Short lead times mean the reminder is urgent."""
    lead = reminder.lead_time.duration
    if lead <= HIGH_PRIORITY_LEAD:
        return "high"
    if lead <= MEDIUM_PRIORITY_LEAD:
        return "medium"
    return "low"


def build_follow_ups(
    reminders: Iterable[Reminder],
    now: datetime,
    tz: pytz.BaseTzInfo,
) -> list[FollowUpItem]:
    """
    Build follow-up items for active reminders.

    Args:
        reminders: Reminders, ideally loaded with their record title
        now: Current instant
        tz: Local timezone

    Returns:
        Items in due order
    """
    now = localize(now, tz)
    items = []
    for reminder in reminders:
        due = due_instant(reminder, tz)
        items.append(
            FollowUpItem(
                id=reminder.id,
                title=reminder.title,
                description=reminder.description
                or f"Reminder for: {reminder.record_title or reminder.title}",
                due_at=due,
                priority=priority_for(reminder),
                status="overdue" if due < now else "pending",
                record_id=reminder.record_id,
            )
        )
    items.sort(key=lambda item: item.due_at)
    return items


def filter_follow_ups(
    items: Iterable[FollowUpItem],
    period: str,
    now: datetime,
    tz: pytz.BaseTzInfo,
) -> list[FollowUpItem]:
    """
    Select the items that belong to a dashboard period.

    "this-week" excludes today and tomorrow; "this-month" excludes this week.
    Weeks start on Sunday.

    Args:
        items: Follow-up items
        period: One of FOLLOW_UP_PERIODS
        now: Current instant
        tz: Local timezone

    Returns:
        Matching items
    """
    if period not in FOLLOW_UP_PERIODS:
        raise ValueError(f"Unknown follow-up period: {period}")

    today = localize(now, tz).date()
    tomorrow = today + timedelta(days=1)
    week_start = today - timedelta(days=(today.weekday() + 1) % 7)
    week_end = week_start + timedelta(days=6)

    def in_week(day) -> bool:
        return week_start <= day <= week_end

    def matches(item: FollowUpItem) -> bool:
        day = item.due_at.astimezone(tz).date()
        if period == "today":
            return day == today
        if period == "tomorrow":
            return day == tomorrow
        if period == "this-week":
            return in_week(day) and day not in (today, tomorrow)
        if period == "this-month":
            return (day.year, day.month) == (today.year, today.month) and not in_week(day)
        if period == "overdue":
            return item.is_overdue
        return True

    return [item for item in items if matches(item)]
