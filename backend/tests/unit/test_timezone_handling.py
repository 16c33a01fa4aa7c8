"""
Configuration helpers: timezone resolution, UTC normalization and flags.
"""

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from clinic.core import config


class TestTimezoneHandling:
    def test_app_timezone_default_utc(self):
        with patch.dict(os.environ, {}, clear=True):
            assert str(config.get_app_timezone()) == "UTC"

    def test_app_timezone_custom(self):
        with patch.dict(os.environ, {"TZ": "America/Sao_Paulo"}):
            assert str(config.get_app_timezone()) == "America/Sao_Paulo"

    def test_app_timezone_invalid_fallback(self):
        with patch.dict(os.environ, {"TZ": "Invalid/Timezone"}):
            assert str(config.get_app_timezone()) == "UTC"

    def test_naive_datetime_is_taken_as_utc(self):
        value = datetime(2025, 3, 10, 9, 0)

        assert config.to_utc_naive(value) == value

    def test_aware_datetime_is_converted(self):
        value = datetime(2025, 3, 10, 9, 0, tzinfo=ZoneInfo("America/Sao_Paulo"))

        assert config.to_utc_naive(value) == datetime(2025, 3, 10, 12, 0)

    def test_utcnow_is_naive(self):
        now = config.utcnow()

        assert now.tzinfo is None
        assert abs(datetime.now(timezone.utc).replace(tzinfo=None) - now) < timedelta(
            seconds=5
        )


@pytest.mark.parametrize(
    "raw, expected",
    [("true", True), ("1", True), ("YES", True), ("false", False), ("0", False)],
)
def test_low_stock_alert_flag(raw, expected):
    with patch.dict(os.environ, {"LOW_STOCK_ALERTS_ENABLED": raw}):
        assert config.get_low_stock_alerts_enabled() is expected
