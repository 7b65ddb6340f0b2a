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

"""Shared test helpers."""

from datetime import date, time
from typing import Optional

from reminders.models import Reminder
from reminders.time_limit import parse_time_limit


def make_reminder(
    reminder_date: date,
    reminder_time: time,
    time_limit: str = "1hour",
    actions: Optional[list[str]] = None,
    reminder_id: str = "rem-1",
    title: str = "Renew passport",
    description: Optional[str] = None,
    record_title: Optional[str] = None,
) -> Reminder:
    """Build an in-memory active reminder."""
    return Reminder(
        id=reminder_id,
        record_id="rec-1",
        title=title,
        description=description,
        reminder_date=reminder_date,
        reminder_time=reminder_time,
        time_limit=time_limit,
        lead_time=parse_time_limit(time_limit),
        actions=list(actions or []),
        is_active=True,
        record_title=record_title,
    )
