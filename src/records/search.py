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
Record Search

In-memory search and filtering over loaded records.

The text query matches title, description, category, or the event date in
any of the formats shown in the app ("Mar 05, 2026", "2026-03-05",
"03/05/2026"). Date bounds accept ISO dates or natural language ("last
month") via dateparser.
"""

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Union

import dateparser

logger = logging.getLogger("recordkeeper.records.search")

DateBound = Union[date, str, None]

DATE_SEARCH_FORMATS = ("%b %d, %Y", "%Y-%m-%d", "%m/%d/%Y")


class SearchError(ValueError):
    """Raised when a date filter cannot be understood."""

    pass


def _event_date(record: dict) -> Optional[date]:
    value = record.get("event_date")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value:
        try:
            return date.fromisoformat(str(value)[:10])
        except ValueError:
            return None
    return None


def parse_date_bound(value: DateBound) -> Optional[date]:
    """
    Resolve a date filter value.

    Args:
        value: date, ISO string, natural language string, or None

    Returns:
        The date, or None when no bound was given

    Raises:
        SearchError: If the string cannot be parsed
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    parsed = dateparser.parse(value, settings={"PREFER_DATES_FROM": "past"})
    if parsed is None:
        raise SearchError(f"Could not parse date: '{value}'")
    return parsed.date()


def _matches_query(record: dict, term: str) -> bool:
    for key in ("title", "description", "category"):
        text = record.get(key)
        if text and term in str(text).lower():
            return True

    event_date = _event_date(record)
    if event_date is None:
        return False
    return any(term in event_date.strftime(fmt).lower() for fmt in DATE_SEARCH_FORMATS)


def search_records(
    records: Iterable[dict],
    query: str = "",
    category: Optional[str] = None,
    date_from: DateBound = None,
    date_to: DateBound = None,
) -> list[dict]:
    """
    Filter records by text query, category and event date range.

    Args:
        records: Record dicts (as returned by RecordManager)
        query: Case-insensitive search text; blank matches everything
        category: Exact category name
        date_from: Earliest event date (inclusive)
        date_to: Latest event date (inclusive, whole day)

    Returns:
        Matching records in their original order
    """
    results = list(records)

    term = (query or "").strip().lower()
    if term:
        results = [r for r in results if _matches_query(r, term)]

    if category:
        results = [r for r in results if r.get("category") == category]

    start = parse_date_bound(date_from)
    end = parse_date_bound(date_to)
    if start or end:
        filtered = []
        for record in results:
            event_date = _event_date(record)
            if event_date is None:
                continue
            if start and event_date < start:
                continue
            if end and event_date > end:
                continue
            filtered.append(record)
        results = filtered

    logger.debug(f"Search '{term}' matched {len(results)} record(s)")
    return results


def get_unique_categories(records: Iterable[dict]) -> list[str]:
    """Sorted distinct category names used by the records."""
    return sorted({r["category"] for r in records if r.get("category")})
