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

"""Tests for the reminder time limit parser."""

import logging
import sys
from datetime import timedelta
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reminders.time_limit import (
    DEFAULT_LEAD_TIME,
    CanonicalLeadTime,
    CustomLeadTime,
    InvalidLeadTime,
    describe_lead_time,
    lead_time_duration,
    parse_time_limit,
)


class TestCanonicalTokens:
    """Test the fixed presets from the reminder form."""

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("5min", timedelta(minutes=5)),
            ("15min", timedelta(minutes=15)),
            ("30min", timedelta(minutes=30)),
            ("1hour", timedelta(hours=1)),
            ("2hours", timedelta(hours=2)),
            ("1day", timedelta(hours=24)),
            ("2days", timedelta(hours=48)),
            ("1week", timedelta(hours=168)),
        ],
    )
    def test_canonical_duration(self, token, expected):
        assert lead_time_duration(token) == expected

    def test_canonical_variant(self):
        assert parse_time_limit("1week") == CanonicalLeadTime("1week")
        assert parse_time_limit("2hours") == CanonicalLeadTime("2hours")

    def test_canonical_is_case_and_space_insensitive(self):
        assert parse_time_limit(" 1HOUR ") == CanonicalLeadTime("1hour")


class TestCustomSpecifiers:
    """Test "<n><unit>" custom lead times."""

    @pytest.mark.parametrize("n", [1, 7, 45, 90])
    def test_minutes(self, n):
        assert lead_time_duration(f"{n}min") == timedelta(minutes=n)

    @pytest.mark.parametrize("n", [1, 3, 12])
    def test_hours(self, n):
        assert lead_time_duration(f"{n}hour") == timedelta(hours=n)

    @pytest.mark.parametrize("n", [1, 3, 10])
    def test_days(self, n):
        assert lead_time_duration(f"{n}day") == timedelta(days=n)

    def test_custom_variant(self):
        assert parse_time_limit("45min") == CustomLeadTime(unit="min", amount=45)

    def test_plural_suffix(self):
        assert parse_time_limit("3hours") == CustomLeadTime(unit="hour", amount=3)
        assert parse_time_limit("5days") == CustomLeadTime(unit="day", amount=5)

    def test_space_between_amount_and_unit(self):
        assert lead_time_duration("10 min") == timedelta(minutes=10)

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("5minutes", timedelta(minutes=5)),
            ("10 minutes", timedelta(minutes=10)),
            ("1 minute", timedelta(minutes=1)),
            ("2 days", timedelta(days=2)),
        ],
    )
    def test_spelled_out_units(self, value, expected):
        assert lead_time_duration(value) == expected

    def test_spelled_out_minutes_label(self):
        assert describe_lead_time("10 minutes") == "10 minutes before"


class TestFallback:
    """Test that unrecognized values fall back to one hour."""

    @pytest.mark.parametrize(
        "value",
        ["", "soon", "abcmin", "min", "-5min", "2weeks", "10minutex", "1.5hour", "3 hourly"],
    )
    def test_unrecognized_returns_default(self, value):
        assert lead_time_duration(value) == DEFAULT_LEAD_TIME == timedelta(hours=1)

    def test_none_returns_default(self):
        assert isinstance(parse_time_limit(None), InvalidLeadTime)
        assert lead_time_duration(None) == timedelta(hours=1)

    def test_invalid_variant_keeps_raw(self):
        assert parse_time_limit("whenever") == InvalidLeadTime("whenever")

    def test_fallback_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="recordkeeper.reminders.time_limit"):
            parse_time_limit("tomorrowish")
        assert "tomorrowish" in caplog.text

    def test_known_value_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="recordkeeper.reminders.time_limit"):
            parse_time_limit("30min")
        assert caplog.text == ""


class TestDescribe:
    """Test human-readable labels."""

    def test_canonical_labels(self):
        assert describe_lead_time("5min") == "5 minutes before"
        assert describe_lead_time("1hour") == "1 hour before"
        assert describe_lead_time("2days") == "2 days before"
        assert describe_lead_time("1week") == "1 week before"

    def test_custom_labels(self):
        assert describe_lead_time("1day") == "1 day before"
        assert describe_lead_time("3hour") == "3 hours before"

    def test_unrecognized_shown_as_entered(self):
        assert describe_lead_time("whenever") == "whenever"
