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

"""Slack incoming-webhook client."""

import logging
from typing import Optional

import httpx

from .base import IntegrationClient

logger = logging.getLogger("recordkeeper.integrations.slack")


class SlackClient(IntegrationClient):
    """Posts messages to a Slack incoming webhook."""

    service = "slack"

    def __init__(self, webhook_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(headers={"Content-Type": "application/json"}, transport=transport)
        self.webhook_url = webhook_url

    async def post(self, text: str) -> None:
        """
        Send a message to the webhook's channel.

        Args:
            text: Message text (Slack mrkdwn)
        """
        await self._post(self.webhook_url, json={"text": text})
        logger.info("Posted Slack notification")
