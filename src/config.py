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
Application Configuration

Runtime settings for the record store, the reminder scheduler and the
notification integrations. Values can be overridden via environment variables.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import pytz

logger = logging.getLogger("recordkeeper.config")


def _optional(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


@dataclass
class AppConfig:
    """Configuration for recordkeeper."""

    database_url: Optional[str] = None

    # Reminder scheduler
    timezone: str = "UTC"
    check_interval_seconds: float = 60.0

    # Push notifications (ntfy-compatible endpoint)
    notify_url: Optional[str] = None
    notify_token: Optional[str] = None
    notification_permission: Optional[str] = None  # granted / denied / default

    # Integrations (each is optional; unconfigured ones only log)
    slack_webhook_url: Optional[str] = None
    email_api_url: Optional[str] = None
    email_api_key: Optional[str] = None
    email_from: Optional[str] = None
    email_to: Optional[str] = None
    whatsapp_api_url: Optional[str] = None
    whatsapp_token: Optional[str] = None
    whatsapp_to: Optional[str] = None

    analytics_enabled: bool = True
    log_level: str = "INFO"

    def __post_init__(self):
        if not validate_timezone(self.timezone):
            logger.warning(f"Invalid timezone '{self.timezone}', falling back to UTC")
            self.timezone = "UTC"

    @property
    def tz(self) -> pytz.BaseTzInfo:
        """Local timezone used to combine reminder dates and times."""
        return pytz.timezone(self.timezone)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create config from environment variables with defaults."""
        return cls(
            database_url=_optional("DATABASE_URL"),
            timezone=os.getenv("RECORDKEEPER_TIMEZONE", "UTC"),
            check_interval_seconds=float(os.getenv("REMINDER_CHECK_INTERVAL", "60")),
            notify_url=_optional("NOTIFY_URL"),
            notify_token=_optional("NOTIFY_TOKEN"),
            notification_permission=_optional("NOTIFICATION_PERMISSION"),
            slack_webhook_url=_optional("SLACK_WEBHOOK_URL"),
            email_api_url=_optional("EMAIL_API_URL"),
            email_api_key=_optional("EMAIL_API_KEY"),
            email_from=_optional("EMAIL_FROM"),
            email_to=_optional("EMAIL_TO"),
            whatsapp_api_url=_optional("WHATSAPP_API_URL"),
            whatsapp_token=_optional("WHATSAPP_TOKEN"),
            whatsapp_to=_optional("WHATSAPP_TO"),
            analytics_enabled=os.getenv("ANALYTICS_ENABLED", "true").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def validate_timezone(tz_name: str) -> bool:
    """
    Validate that a timezone name is valid.

    Args:
        tz_name: IANA timezone name (e.g., "America/Los_Angeles")

    Returns:
        True if valid, False otherwise
    """
    try:
        pytz.timezone(tz_name)
        return True
    except pytz.UnknownTimeZoneError:
        return False
