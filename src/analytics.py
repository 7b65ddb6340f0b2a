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
Lightweight analytics tracking for recordkeeper.

Usage:
    from analytics import track, track_async

    # Synchronous (fire-and-forget, uses background task)
    track("reminder_fired", "reminder", record_id=record_id, properties={"actions": 2})

    # Async (when you need to await completion)
    await track_async("scheduler_error", "error", properties={"error_type": "StoreError"})
"""

import asyncio
import json
import logging
import os
from typing import Any, Optional

import asyncpg

logger = logging.getLogger("recordkeeper.analytics")

# Module-level connection pool (shared with the app, or created lazily)
_pool: Optional[asyncpg.Pool] = None
_owns_pool: bool = False
_enabled: bool = os.getenv("ANALYTICS_ENABLED", "true").lower() == "true"

# Pending fire-and-forget tasks, kept referenced until they finish
_pending: set[asyncio.Task] = set()


def configure(pool: Optional[asyncpg.Pool] = None, enabled: Optional[bool] = None) -> None:
    """
    Point analytics at the application's pool.

    Args:
        pool: Existing asyncpg pool to write events through
        enabled: Override the ANALYTICS_ENABLED setting
    """
    global _pool, _owns_pool, _enabled
    if enabled is not None:
        _enabled = enabled
    if pool is not None:
        _pool = pool
        _owns_pool = False


async def _get_pool() -> Optional[asyncpg.Pool]:
    """Get or create the connection pool."""
    global _pool, _owns_pool
    if _pool is None and _enabled:
        database_url = os.getenv("DATABASE_URL")
        if database_url:
            try:
                _pool = await asyncpg.create_pool(database_url, min_size=1, max_size=3)
                _owns_pool = True
            except Exception as e:
                logger.warning(f"Analytics pool creation failed: {e}")
                return None
    return _pool


async def track_async(
    event_name: str,
    event_category: str,
    record_id: Optional[Any] = None,
    properties: Optional[dict[str, Any]] = None,
) -> bool:
    """
    Track an event asynchronously.

    Args:
        event_name: Specific event identifier (e.g., "reminder_fired")
        event_category: One of: reminder, record, tool, error, system
        record_id: Related record ID (optional)
        properties: Additional event data as key-value pairs

    Returns:
        True if event was recorded, False otherwise
    """
    if not _enabled:
        return False

    pool = await _get_pool()
    if pool is None:
        return False

    try:
        await pool.execute(
            """
            INSERT INTO analytics_events
                (event_name, event_category, record_id, properties)
            VALUES ($1, $2, $3, $4)
            """,
            event_name,
            event_category,
            str(record_id) if record_id is not None else None,
            json.dumps(properties or {}, default=str),
        )
        return True
    except Exception as e:
        logger.debug(f"Analytics tracking failed: {e}")
        return False


def track(
    event_name: str,
    event_category: str,
    record_id: Optional[Any] = None,
    properties: Optional[dict[str, Any]] = None,
) -> None:
    """
    Track an event (fire-and-forget).

    Creates a background task to record the event without blocking.
    Safe to call from sync or async contexts.
    """
    if not _enabled:
        return

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop - skip tracking
        return

    task = loop.create_task(track_async(event_name, event_category, record_id, properties))
    _pending.add(task)
    task.add_done_callback(_pending.discard)


async def shutdown() -> None:
    """Close the connection pool if analytics created it. Call on server shutdown."""
    global _pool, _owns_pool
    if _pool is not None and _owns_pool:
        await _pool.close()
    _pool = None
    _owns_pool = False
