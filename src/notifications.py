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
Notification Center

Owns the notification permission and the push surface reminders are shown on.

The permission is requested once at start-up and cached for the lifetime of
the process; it is never re-requested automatically. Notifications are pushed
to an ntfy-compatible endpoint (NOTIFY_URL); without one they are only logged.
"""

import base64
import logging
from enum import Enum
from typing import Optional

import httpx

from integrations.base import IntegrationClient

logger = logging.getLogger("recordkeeper.notifications")


def encode_header(value: str) -> str:
    """Header-safe form of value; non-ASCII text is sent as an RFC 2047 encoded word."""
    if value.isascii():
        return value
    encoded = base64.b64encode(value.encode("utf-8")).decode("ascii")
    return f"=?UTF-8?B?{encoded}?="


class NotificationPermission(str, Enum):
    """Permission states, mirroring the browser Notification API."""

    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"


class NotificationCenter(IntegrationClient):
    """Push surface for reminder notifications."""

    service = "notifications"

    def __init__(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        configured_permission: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        super().__init__(headers=headers, transport=transport)
        self.url = url
        self._configured_permission = configured_permission
        self._permission = NotificationPermission.DEFAULT
        self._requested = False

    @property
    def permission(self) -> NotificationPermission:
        return self._permission

    @property
    def permission_granted(self) -> bool:
        return self._permission == NotificationPermission.GRANTED

    async def request_permission(self) -> NotificationPermission:
        """
        Resolve the notification permission (once per process).

        An explicit NOTIFICATION_PERMISSION setting wins; otherwise permission
        is granted when a push endpoint is configured and left at "default"
        when there is nowhere to push to.

        Returns:
            The cached permission state
        """
        if self._requested:
            return self._permission
        self._requested = True

        if self._configured_permission:
            try:
                self._permission = NotificationPermission(self._configured_permission.lower())
            except ValueError:
                logger.warning(
                    f"Invalid notification permission '{self._configured_permission}', using 'default'"
                )
                self._permission = NotificationPermission.DEFAULT
        elif self.url:
            self._permission = NotificationPermission.GRANTED
        else:
            self._permission = NotificationPermission.DEFAULT

        logger.info(f"Notification permission: {self._permission.value}")
        return self._permission

    async def show(
        self,
        title: str,
        body: str,
        tag: Optional[str] = None,
        click_url: Optional[str] = None,
    ) -> None:
        """
        Show a notification.

        Args:
            title: Notification title
            body: Notification body
            tag: Identifier of the thing being notified about (reminder id)
            click_url: URL to open when the notification is clicked
        """
        if not self.url:
            logger.info(f"Notification [{tag}]: {title} - {body}")
            return

        headers = {"Title": encode_header(title), "Priority": "high", "Tags": "bell"}
        if click_url:
            headers["Click"] = click_url

        await self._post(self.url, content=body.encode("utf-8"), headers=headers)
        logger.info(f"Pushed notification [{tag}]: {title}")

    async def open_url(self, url: str, title: str) -> None:
        """
        Hand a link to the user (e.g. a pre-filled calendar event).

        Pushed as a clickable notification; logged when no push endpoint exists.
        """
        if not self.url:
            logger.info(f"Open link for '{title}': {url}")
            return
        await self.show(title, f"Open: {url}", click_url=url)
