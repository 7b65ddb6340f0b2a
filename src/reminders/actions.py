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
Reminder Actions Module

Named actions a reminder runs when it fires, and the dispatcher that runs them.

Actions live in an open registry (name -> handler), so new ones can be added
without touching the dispatcher. Every action is fire-and-forget: a failing
handler is logged and the remaining actions still run.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import quote, urlencode

import pytz

from analytics import track
from integrations import EmailClient, SlackClient, WhatsAppClient
from notifications import NotificationCenter

from .evaluator import due_instant
from .models import Reminder

logger = logging.getLogger("recordkeeper.reminders.actions")

SHOW_BROWSER_NOTIFICATION = "Show browser notification"
SEND_EMAIL_NOTIFICATION = "Send email notification"
ADD_TO_CALENDAR = "Add to calendar"
CREATE_FOLLOW_UP_TASK = "Create follow-up task"
SEND_SLACK_NOTIFICATION = "Send Slack notification"
CREATE_MEETING_REMINDER = "Create meeting reminder"
SEND_WHATSAPP_MESSAGE = "Send WhatsApp message"

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"


def reminder_body(reminder: Reminder) -> str:
    """Notification body: the description, or a generic line for the title."""
    return reminder.description or f"Reminder for: {reminder.title}"


def _due_text(reminder: Reminder) -> str:
    return f"{reminder.reminder_date.isoformat()} {reminder.reminder_time.strftime('%H:%M')}"


class ReminderAction(ABC):
    """A named side effect executed when a reminder fires."""

    name: str = ""

    @abstractmethod
    async def execute(self, reminder: Reminder) -> None:
        """Run the action for a reminder. May raise; the dispatcher handles it."""


class ActionRegistry:
    """Mapping of action name to handler."""

    def __init__(self, actions: Iterable[ReminderAction] = ()):
        self._actions: dict[str, ReminderAction] = {}
        for action in actions:
            self.register(action)

    def register(self, action: ReminderAction) -> None:
        """Add or replace the handler for action.name."""
        if not action.name:
            raise ValueError("Reminder action must have a name")
        self._actions[action.name] = action

    def get(self, name: str) -> Optional[ReminderAction]:
        return self._actions.get(name)

    def names(self) -> list[str]:
        return list(self._actions)

    def __contains__(self, name: str) -> bool:
        return name in self._actions


# =============================================================================
# Built-in actions
# =============================================================================


class BrowserNotificationAction(ReminderAction):
    """Show a notification; requires a previously granted permission."""

    name = SHOW_BROWSER_NOTIFICATION

    def __init__(self, notifications: NotificationCenter):
        self.notifications = notifications

    async def execute(self, reminder: Reminder) -> None:
        if not self.notifications.permission_granted:
            logger.info(
                f"Notification permission not granted "
                f"({self.notifications.permission.value}), skipping reminder {reminder.id}"
            )
            return
        await self.notifications.show(
            reminder.title,
            reminder_body(reminder),
            tag=str(reminder.id),
        )


class EmailNotificationAction(ReminderAction):
    name = SEND_EMAIL_NOTIFICATION

    def __init__(self, client: Optional[EmailClient] = None):
        self.client = client

    async def execute(self, reminder: Reminder) -> None:
        if self.client is None:
            logger.info(f"Sending email notification for: {reminder.title} (email not configured)")
            return
        await self.client.send(
            subject=f"Reminder: {reminder.title}",
            body=f"{reminder_body(reminder)}\n\nDue: {_due_text(reminder)}",
        )


class AddToCalendarAction(ReminderAction):
    """Build a pre-filled Google Calendar event link for the reminder."""

    name = ADD_TO_CALENDAR

    def __init__(self, notifications: NotificationCenter, tz: pytz.BaseTzInfo):
        self.notifications = notifications
        self.tz = tz

    def calendar_url(self, reminder: Reminder) -> str:
        stamp = due_instant(reminder, self.tz).astimezone(pytz.UTC).strftime("%Y%m%dT%H%M%SZ")
        query = urlencode(
            {
                "action": "TEMPLATE",
                "text": reminder.title,
                "details": reminder.description or "",
                "dates": f"{stamp}/{stamp}",
            },
            quote_via=quote,
        )
        return f"{GOOGLE_CALENDAR_URL}?{query}"

    async def execute(self, reminder: Reminder) -> None:
        await self.notifications.open_url(self.calendar_url(reminder), reminder.title)


class SlackNotificationAction(ReminderAction):
    name = SEND_SLACK_NOTIFICATION

    def __init__(self, client: Optional[SlackClient] = None):
        self.client = client

    async def execute(self, reminder: Reminder) -> None:
        if self.client is None:
            logger.info(f"Sending Slack notification for: {reminder.title} (Slack not configured)")
            return
        await self.client.post(
            f":bell: *{reminder.title}*\n{reminder_body(reminder)}\nDue: {_due_text(reminder)}"
        )


class WhatsAppMessageAction(ReminderAction):
    name = SEND_WHATSAPP_MESSAGE

    def __init__(self, client: Optional[WhatsAppClient] = None):
        self.client = client

    async def execute(self, reminder: Reminder) -> None:
        if self.client is None:
            logger.info(f"Sending WhatsApp message for: {reminder.title} (WhatsApp not configured)")
            return
        await self.client.send(f"Reminder: {reminder.title}\n{reminder_body(reminder)}")


class LogOnlyAction(ReminderAction):
    """Extension point for actions with no backing integration yet."""

    def __init__(self, name: str, verb: str):
        self.name = name
        self.verb = verb

    async def execute(self, reminder: Reminder) -> None:
        logger.info(f"{self.verb} for: {reminder.title}")


def default_registry(
    notifications: NotificationCenter,
    tz: pytz.BaseTzInfo,
    email: Optional[EmailClient] = None,
    slack: Optional[SlackClient] = None,
    whatsapp: Optional[WhatsAppClient] = None,
) -> ActionRegistry:
    """
    Registry with every built-in action.

    Args:
        notifications: Notification surface (browser notifications, calendar links)
        tz: Local timezone for due instants
        email: Optional email client
        slack: Optional Slack client
        whatsapp: Optional WhatsApp client

    Returns:
        Populated ActionRegistry
    """
    return ActionRegistry(
        [
            BrowserNotificationAction(notifications),
            EmailNotificationAction(email),
            AddToCalendarAction(notifications, tz),
            LogOnlyAction(CREATE_FOLLOW_UP_TASK, "Creating follow-up task"),
            SlackNotificationAction(slack),
            LogOnlyAction(CREATE_MEETING_REMINDER, "Creating meeting reminder"),
            WhatsAppMessageAction(whatsapp),
        ]
    )


# =============================================================================
# Dispatcher
# =============================================================================


@dataclass
class DispatchResult:
    """Outcome counts for one reminder's action list."""

    executed: int = 0
    skipped: int = 0
    failed: int = 0


class ActionDispatcher:
    """Runs a reminder's actions in order, isolating each one."""

    def __init__(self, registry: ActionRegistry):
        self.registry = registry

    async def dispatch(self, reminder: Reminder) -> DispatchResult:
        """
        Execute every action named by the reminder, one at a time.

        Unknown names are skipped; a failing action is logged and does not
        stop the ones after it.

        Args:
            reminder: The reminder that fired

        Returns:
            DispatchResult with executed/skipped/failed counts
        """
        result = DispatchResult()
        logger.info(f"Triggering reminder {reminder.id}: {reminder.title}")

        for name in reminder.actions:
            action = self.registry.get(name)
            if action is None:
                logger.warning(f"Unknown action '{name}' on reminder {reminder.id}, skipping")
                result.skipped += 1
                continue

            try:
                await action.execute(reminder)
                result.executed += 1
            except Exception as e:
                result.failed += 1
                logger.error(
                    f"Action '{name}' failed for reminder {reminder.id}: {e}",
                    exc_info=True,
                )
                track(
                    "reminder_action_failed",
                    "error",
                    properties={
                        "reminder_id": str(reminder.id),
                        "action": name,
                        "error_type": type(e).__name__,
                        "error_message": str(e)[:200],
                    },
                )

        return result
