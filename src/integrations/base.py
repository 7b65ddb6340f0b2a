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
Integration Client Base

Shared httpx plumbing for the outbound notification integrations.
"""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger("recordkeeper.integrations")

DEFAULT_TIMEOUT = 30.0


class IntegrationError(Exception):
    """Raised when an external integration call fails."""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status_code = status_code


class IntegrationClient:
    """Thin wrapper around an httpx.AsyncClient for one external service."""

    service = "integration"

    def __init__(
        self,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            headers=headers or {},
            timeout=DEFAULT_TIMEOUT,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client"""
        await self._client.aclose()

    async def _post(self, url: str, **kwargs: Any) -> httpx.Response:
        """
        POST to the service, raising IntegrationError on any failure.

        Args:
            url: Target URL
            **kwargs: Passed through to httpx (json=, content=, headers=)

        Returns:
            The successful response
        """
        try:
            response = await self._client.post(url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            body = e.response.text[:200]
            raise IntegrationError(
                self.service,
                f"HTTP {e.response.status_code}: {body}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise IntegrationError(self.service, str(e) or type(e).__name__) from e
