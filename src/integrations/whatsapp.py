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
WhatsApp Client

Sends text messages through the WhatsApp Business Cloud API
(POST {phone-number-id}/messages).
"""

import logging
from typing import Optional

import httpx

from .base import IntegrationClient

logger = logging.getLogger("recordkeeper.integrations.whatsapp")


class WhatsAppClient(IntegrationClient):
    """Client for the WhatsApp Cloud API messages endpoint."""

    service = "whatsapp"

    def __init__(
        self,
        api_url: str,
        token: str,
        recipient: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )
        self.api_url = api_url
        self.recipient = recipient

    async def send(self, text: str) -> None:
        """Send a text message to the configured recipient."""
        payload = {
            "messaging_product": "whatsapp",
            "to": self.recipient,
            "type": "text",
            "text": {"body": text[:4096]},
        }
        await self._post(self.api_url, json=payload)
        logger.info(f"Sent WhatsApp message to {self.recipient}")
