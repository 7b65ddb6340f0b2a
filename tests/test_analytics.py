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

"""Tests for analytics event tracking."""

import asyncio
import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import analytics


@pytest.fixture
def pool():
    db = MagicMock()
    db.execute = AsyncMock(return_value="INSERT 0 1")
    analytics.configure(pool=db, enabled=True)
    yield db
    analytics._pool = None
    analytics._owns_pool = False


class TestTrackAsync:
    @pytest.mark.asyncio
    async def test_inserts_event(self, pool):
        recorded = await analytics.track_async(
            "reminder_fired", "reminder", record_id=42, properties={"executed": 2}
        )

        assert recorded is True
        args = pool.execute.await_args.args
        assert args[1:4] == ("reminder_fired", "reminder", "42")
        assert json.loads(args[4]) == {"executed": 2}

    @pytest.mark.asyncio
    async def test_disabled(self, pool):
        analytics.configure(enabled=False)
        try:
            assert await analytics.track_async("reminder_fired", "reminder") is False
        finally:
            analytics.configure(enabled=True)
        pool.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self, pool):
        pool.execute.side_effect = RuntimeError("table missing")
        assert await analytics.track_async("reminder_fired", "reminder") is False

    @pytest.mark.asyncio
    async def test_shutdown_keeps_shared_pool(self, pool):
        pool.close = AsyncMock()
        await analytics.shutdown()
        pool.close.assert_not_awaited()


class TestTrack:
    def test_without_loop_is_noop(self, pool):
        analytics.track("reminder_fired", "reminder")
        pool.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_fire_and_forget(self, pool):
        analytics.track("scheduler_error", "error", properties={"error_type": "X"})
        await asyncio.gather(*list(analytics._pending))
        pool.execute.assert_awaited_once()
