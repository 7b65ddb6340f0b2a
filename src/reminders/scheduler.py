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
Reminder Scheduler Module

Background task loop that checks reminders and runs the actions of those
whose firing window contains "now". Uses discord.ext.tasks for the timer.

Each tick re-fetches from the store; nothing is cached between ticks and
nothing is written back, so a reminder inside its window fires on every tick
until its due time passes.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

import pytz
from discord.ext import tasks

from analytics import track
from store import StoreError

from .actions import ActionDispatcher
from .evaluator import firing_window, is_due
from .manager import ReminderManager

logger = logging.getLogger("recordkeeper.reminders.scheduler")

DEFAULT_CHECK_INTERVAL_SECONDS = 60.0


def _utcnow() -> datetime:
    return datetime.now(pytz.UTC)


class ReminderScheduler:
    """
    Background scheduler for firing reminders.

    Runs a loop every 60 seconds (first check immediately on start) to fetch
    active reminders, evaluate their windows and dispatch their actions.
    Created and disposed by the hosting application; nothing here is global.
    """

    def __init__(
        self,
        manager: ReminderManager,
        dispatcher: ActionDispatcher,
        tz: Optional[pytz.BaseTzInfo] = None,
        check_interval_seconds: float = DEFAULT_CHECK_INTERVAL_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the reminder scheduler.

        Args:
            manager: Reminder store access
            dispatcher: Runs the actions of due reminders
            tz: Local timezone of reminder dates and times
            check_interval_seconds: Seconds between checks
            clock: Returns the current instant (injectable for tests)
        """
        self.manager = manager
        self.dispatcher = dispatcher
        self.tz = tz or pytz.UTC
        self.clock = clock or _utcnow
        self.check_interval_seconds = check_interval_seconds
        self.last_check_at: Optional[datetime] = None
        self.check_count = 0
        self._started = False
        self._tick_in_progress = False
        self._restart_pending = False

        if check_interval_seconds != DEFAULT_CHECK_INTERVAL_SECONDS:
            self._check_reminders.change_interval(seconds=check_interval_seconds)

    def start(self) -> None:
        """
        Start the scheduler loop, replacing the running one if any.

        A check in progress is never cancelled: if the loop is still finishing
        one (after stop(), or mid-check), the new loop starts once it exits.
        """
        loop = self._check_reminders
        if self._restart_pending:
            self._started = True
            return

        if loop.is_running() and (self._tick_in_progress or not self._started):
            # Let the current iteration finish, then start again
            loop.stop()
            self._restart_pending = True
            loop.get_task().add_done_callback(self._start_after_exit)
            logger.info("Reminder scheduler will restart after the current check")
        elif loop.is_running():
            loop.restart()
            logger.info("Reminder scheduler restarted")
        else:
            loop.start()
            logger.info(f"Reminder scheduler started (every {self.check_interval_seconds:g}s)")
        self._started = True

    def _start_after_exit(self, task) -> None:
        self._restart_pending = False
        if self._started and not self._check_reminders.is_running():
            self._check_reminders.start()
            logger.info("Reminder scheduler restarted")

    def stop(self) -> None:
        """Stop the scheduler loop. A check already running is allowed to finish."""
        if not self._started:
            return
        self._started = False
        if self._tick_in_progress:
            # Exit after the current iteration instead of cancelling it
            self._check_reminders.stop()
        else:
            self._check_reminders.cancel()
        logger.info("Reminder scheduler stopped")

    def is_running(self) -> bool:
        return self._started

    def status(self) -> dict:
        """Snapshot of the scheduler state for diagnostics."""
        return {
            "running": self._started,
            "check_in_progress": self._tick_in_progress,
            "check_interval_seconds": self.check_interval_seconds,
            "last_check_at": self.last_check_at.isoformat() if self.last_check_at else None,
            "check_count": self.check_count,
        }

    @tasks.loop(seconds=DEFAULT_CHECK_INTERVAL_SECONDS)
    async def _check_reminders(self) -> None:
        """Timer body: one reminder check."""
        await self.run_once()

    async def run_once(self, now: Optional[datetime] = None) -> int:
        """
        Fetch, evaluate and dispatch once.

        Never raises: store failures skip the check, and any other error is
        logged at this boundary so the timer keeps running.

        Args:
            now: Instant to evaluate against (defaults to the clock)

        Returns:
            Number of reminders fired
        """
        if self._tick_in_progress:
            logger.debug("Reminder check already in progress, skipping")
            return 0

        self._tick_in_progress = True
        fired = 0
        try:
            now = now or self.clock()
            self.last_check_at = now
            self.check_count += 1

            reminders = await self.manager.fetch_active(now)
            logger.debug(f"Checking {len(reminders)} active reminder(s)")

            for reminder in reminders:
                try:
                    if not is_due(reminder, now, self.tz):
                        continue
                    start, due = firing_window(reminder, self.tz)
                    logger.info(
                        f"Reminder {reminder.id} due at {due.isoformat()} "
                        f"(window opened {start.isoformat()})"
                    )
                    result = await self.dispatcher.dispatch(reminder)
                    fired += 1
                    track(
                        "reminder_fired",
                        "reminder",
                        record_id=reminder.record_id,
                        properties={
                            "reminder_id": str(reminder.id),
                            "executed": result.executed,
                            "skipped": result.skipped,
                            "failed": result.failed,
                        },
                    )
                except Exception as e:
                    logger.error(f"Error processing reminder {reminder.id}: {e}", exc_info=True)

            if fired:
                logger.info(f"Fired {fired} reminder(s)")

        except StoreError as e:
            logger.warning(f"Skipping reminder check, store unavailable: {e}")
        except Exception as e:
            logger.error(f"Error in reminder scheduler loop: {e}", exc_info=True)
            track(
                "scheduler_error",
                "error",
                properties={
                    "error_type": type(e).__name__,
                    "error_message": str(e)[:200],
                },
            )
        finally:
            self._tick_in_progress = False

        return fired
