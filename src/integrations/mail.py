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
Email Client

Sends mail through a SendGrid-compatible HTTP API (v3 "mail/send" payload).
"""

import logging
from typing import Optional

import httpx

from .base import IntegrationClient

logger = logging.getLogger("recordkeeper.integrations.mail")


class EmailClient(IntegrationClient):
    """Client for a SendGrid-compatible mail API."""

    service = "email"

    def __init__(
        self,
        api_url: str,
        api_key: str,
        sender: str,
        recipient: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )
        self.api_url = api_url
        self.sender = sender
        self.recipient = recipient

    async def send(self, subject: str, body: str) -> None:
        """
        Send a plain-text email to the configured recipient.

        Args:
            subject: Subject line
            body: Plain-text body
        """
        payload = {
            "personalizations": [{"to": [{"email": self.recipient}]}],
            "from": {"email": self.sender},
            "subject": subject,
            "content": [{"type": "text/plain", "value": body}],
        }
        await self._post(self.api_url, json=payload)
        logger.info(f"Sent email '{subject}' to {self.recipient}")
