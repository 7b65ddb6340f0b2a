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
Trigger Evaluator Module

Decides whether "now" falls inside a reminder's firing window
[due - lead, due], both ends inclusive. There is no missed-window
suppression: a reminder seen for the first time inside its window fires.
"""

from datetime import date, datetime

import pytz

from .models import Reminder


def localize(moment: datetime, tz: pytz.BaseTzInfo) -> datetime:
    """Return an aware datetime in tz; naive values are taken as local time."""
    if moment.tzinfo is None:
        return tz.localize(moment)
    return moment.astimezone(tz)


def local_today(now: datetime, tz: pytz.BaseTzInfo) -> date:
    """Local calendar date of now."""
    return localize(now, tz).date()


def due_instant(reminder: Reminder, tz: pytz.BaseTzInfo) -> datetime:
    """Combine reminder_date and reminder_time into an aware local instant."""
    return tz.localize(datetime.combine(reminder.reminder_date, reminder.reminder_time))


def firing_window(reminder: Reminder, tz: pytz.BaseTzInfo) -> tuple[datetime, datetime]:
    """
    Get the window in which a reminder is due.

    Returns:
        Tuple of (window_start, due_instant)
    """
    due = due_instant(reminder, tz)
    return due - reminder.lead_time.duration, due


def is_due(reminder: Reminder, now: datetime, tz: pytz.BaseTzInfo) -> bool:
    """
    Check whether a reminder should fire at now.

    Args:
        reminder: Loaded reminder
        now: Current instant (naive values are interpreted in tz)
        tz: Local timezone of the reminder's date and time

    Returns:
        True iff due - lead <= now <= due
    """
    start, due = firing_window(reminder, tz)
    return start <= localize(now, tz) <= due
