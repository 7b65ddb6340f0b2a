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
Reminders Package

Reminder storage, lead-time parsing, window evaluation, action dispatch and
the background scheduler that ties them together.
"""

from .actions import (
    ActionDispatcher,
    ActionRegistry,
    DispatchResult,
    ReminderAction,
    default_registry,
)
from .evaluator import due_instant, firing_window, is_due
from .follow_ups import FollowUpItem, build_follow_ups, filter_follow_ups
from .manager import ReminderManager
from .models import Reminder, ReminderValidationError
from .scheduler import ReminderScheduler
from .time_limit import (
    CANONICAL_TIME_LIMITS,
    DEFAULT_LEAD_TIME,
    CanonicalLeadTime,
    CustomLeadTime,
    InvalidLeadTime,
    LeadTime,
    describe_lead_time,
    lead_time_duration,
    parse_time_limit,
)

__all__ = [
    "ActionDispatcher",
    "ActionRegistry",
    "DispatchResult",
    "ReminderAction",
    "default_registry",
    "due_instant",
    "firing_window",
    "is_due",
    "FollowUpItem",
    "build_follow_ups",
    "filter_follow_ups",
    "ReminderManager",
    "Reminder",
    "ReminderValidationError",
    "ReminderScheduler",
    "CANONICAL_TIME_LIMITS",
    "DEFAULT_LEAD_TIME",
    "CanonicalLeadTime",
    "CustomLeadTime",
    "InvalidLeadTime",
    "LeadTime",
    "describe_lead_time",
    "lead_time_duration",
    "parse_time_limit",
]
