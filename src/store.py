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
Record Store Errors

Translates asyncpg driver failures into a single StoreError carrying a
kind + message pair, so callers above the managers never see driver types.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

import asyncpg

logger = logging.getLogger("recordkeeper.store")

# Driver-level failures that count as store errors
_STORE_EXCEPTIONS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class StoreError(Exception):
    """Raised when a store operation fails."""

    def __init__(self, kind: str, message: str):
        super().__init__(f"{kind}: {message}")
        self.kind = kind
        self.message = message


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Wrap a block of store calls, re-raising driver failures as StoreError.

    Args:
        operation: Short description used in the log line (e.g. "fetch reminders")
    """
    try:
        yield
    except _STORE_EXCEPTIONS as e:
        kind = getattr(e, "sqlstate", None) or type(e).__name__
        logger.error(f"Store error during {operation}: {kind}: {e}")
        raise StoreError(kind, str(e)) from e


def rows_affected(status: str) -> int:
    """Parse the row count out of an asyncpg command status ("UPDATE 1")."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError):
        return 0
