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
Time Limit Parser Module

Parses a reminder's lead-time specifier ("time_limit") into a duration.
Supports the fixed presets offered by the reminder form ("15min", "1day")
and custom values of the form "<n>min", "<n>hour" or "<n>day" (plural and
"minute(s)" spellings accepted, with or without a space before the unit).

Anything else falls back to a one hour lead time. The parser never raises:
a malformed value must not stop the scheduler.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Union

logger = logging.getLogger("recordkeeper.reminders.time_limit")

DEFAULT_LEAD_TIME = timedelta(hours=1)

# Presets offered by the reminder form
CANONICAL_TIME_LIMITS = {
    "5min": timedelta(minutes=5),
    "15min": timedelta(minutes=15),
    "30min": timedelta(minutes=30),
    "1hour": timedelta(hours=1),
    "2hours": timedelta(hours=2),
    "1day": timedelta(days=1),
    "2days": timedelta(days=2),
    "1week": timedelta(weeks=1),
}

# Custom units, in the order they are matched
CUSTOM_UNITS = [
    ("min", timedelta(minutes=1)),
    ("hour", timedelta(hours=1)),
    ("day", timedelta(days=1)),
]

_UNIT_LABELS = {"min": "minute", "hour": "hour", "day": "day"}

# Text allowed after each unit ("45min", "45 minutes", "3hours")
_UNIT_SUFFIXES = {
    "min": ("", "s", "ute", "utes"),
    "hour": ("", "s"),
    "day": ("", "s"),
}


@dataclass(frozen=True)
class CanonicalLeadTime:
    """One of the fixed presets."""

    token: str

    @property
    def duration(self) -> timedelta:
        return CANONICAL_TIME_LIMITS[self.token]


@dataclass(frozen=True)
class CustomLeadTime:
    """A custom "<amount><unit>" lead time."""

    unit: str
    amount: int

    @property
    def duration(self) -> timedelta:
        return dict(CUSTOM_UNITS)[self.unit] * self.amount


@dataclass(frozen=True)
class InvalidLeadTime:
    """An unrecognized specifier; behaves as the default lead time."""

    raw: str

    @property
    def duration(self) -> timedelta:
        return DEFAULT_LEAD_TIME


LeadTime = Union[CanonicalLeadTime, CustomLeadTime, InvalidLeadTime]


def _parse_custom(spec: str) -> Optional[CustomLeadTime]:
    """Match "<n><unit>" with an optional plural or spelled-out unit; None if it doesn't fit."""
    for unit, _ in CUSTOM_UNITS:
        index = spec.find(unit)
        if index < 0:
            continue
        prefix = spec[:index].strip()
        suffix = spec[index + len(unit):]
        if not prefix.isdigit() or suffix not in _UNIT_SUFFIXES[unit]:
            return None
        return CustomLeadTime(unit=unit, amount=int(prefix))
    return None


def parse_time_limit(spec: Optional[str]) -> LeadTime:
    """
    Resolve a time_limit specifier.

    Args:
        spec: Canonical token ("1hour") or custom value ("45min")

    Returns:
        CanonicalLeadTime, CustomLeadTime or InvalidLeadTime
    """
    raw = spec or ""
    normalized = raw.strip().lower()

    if normalized in CANONICAL_TIME_LIMITS:
        return CanonicalLeadTime(normalized)

    custom = _parse_custom(normalized)
    if custom is not None:
        return custom

    logger.warning(
        f"Unrecognized time limit '{raw}', using default lead time of {DEFAULT_LEAD_TIME}"
    )
    return InvalidLeadTime(raw)


def lead_time_duration(spec: Optional[str]) -> timedelta:
    """Duration before the due instant at which a reminder becomes due."""
    return parse_time_limit(spec).duration


def describe_lead_time(spec: Optional[str]) -> str:
    """
    Human-readable label for a time_limit, e.g. "2 hours before".

    Unrecognized values are shown as entered.
    """
    lead = parse_time_limit(spec) if spec else InvalidLeadTime("")
    if isinstance(lead, InvalidLeadTime):
        return lead.raw

    if isinstance(lead, CanonicalLeadTime):
        amount = int("".join(ch for ch in lead.token if ch.isdigit()))
        unit = lead.token.lstrip("0123456789").rstrip("s")
        label = {"min": "minute", "hour": "hour", "day": "day", "week": "week"}[unit]
    else:
        amount = lead.amount
        label = _UNIT_LABELS[lead.unit]

    plural = "" if amount == 1 else "s"
    return f"{amount} {label}{plural} before"
