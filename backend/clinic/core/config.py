"""
Centralized configuration module for application-wide settings.

This module provides centralized configuration for timezone handling,
low-stock alerting and invoice document settings, ensuring consistency
across the application.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

# ===========================
# Timezone Configuration
# ===========================


def get_app_timezone() -> ZoneInfo:
    """
    Get the application timezone from environment variable.

    Returns:
        ZoneInfo: Application timezone (defaults to UTC if not configured)

    Environment Variables:
        TZ: Timezone identifier (e.g., 'Europe/Lisbon', 'UTC')
            Default: 'UTC'

    Only used for display (invoice documents, dashboard "today").
    Persisted timestamps are always naive UTC.
    """
    tz_name = os.getenv("TZ", "UTC")

    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        logger.warning(
            f"Invalid timezone '{tz_name}' specified in TZ environment variable. "
            f"Falling back to UTC. Error: {e}"
        )
        return ZoneInfo("UTC")


APP_TZ = get_app_timezone()


def utcnow() -> datetime:
    """Current time as naive UTC, the representation stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime) -> datetime:
    """Normalize a datetime to naive UTC. Naive input is taken as UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def log_timezone_config():
    """Log the active timezone configuration at startup."""
    logger.info(
        "Timezone configuration initialized",
        extra={
            "context": {
                "timezone": str(APP_TZ),
                "tz_env_var": os.getenv("TZ", "UTC"),
            }
        },
    )


# ===========================
# Low-Stock Alert Configuration
# ===========================


def get_low_stock_alerts_enabled() -> bool:
    """
    Get whether low-stock notifications are emitted.

    Environment Variables:
        LOW_STOCK_ALERTS_ENABLED: Whether to notify on low stock
            Default: 'true'

    Truthy values: "true", "1", "yes" (case-insensitive)
    """
    flag_str = os.getenv("LOW_STOCK_ALERTS_ENABLED", "true")
    return flag_str.strip().lower() in ("true", "1", "yes")


LOW_STOCK_ALERTS_ENABLED = get_low_stock_alerts_enabled()


# ===========================
# Invoice Document Configuration
# ===========================


def get_clinic_name() -> str:
    """Clinic name printed on invoice documents (CLINIC_NAME)."""
    return os.getenv("CLINIC_NAME", "Smart Clinic")


def get_currency_symbol() -> str:
    """Currency symbol printed on invoice documents (CURRENCY_SYMBOL)."""
    return os.getenv("CURRENCY_SYMBOL", "$")


CLINIC_NAME = get_clinic_name()
CURRENCY_SYMBOL = get_currency_symbol()


def log_clinic_config():
    """Log the active clinic configuration at startup."""
    logger.info(
        "Clinic configuration initialized",
        extra={
            "context": {
                "clinic_name": CLINIC_NAME,
                "currency_symbol": CURRENCY_SYMBOL,
                "low_stock_alerts_enabled": LOW_STOCK_ALERTS_ENABLED,
            }
        },
    )


# ===========================
# Environment helpers
# ===========================


def get_environment() -> str:
    return os.getenv("FLASK_ENV", "development")


def is_testing() -> bool:
    """True when TESTING is set to a truthy value (set by the test suite)."""
    return os.getenv("TESTING", "").lower().strip() in ("true", "1", "yes")


def get_secret_key() -> str:
    return os.getenv("FLASK_SECRET_KEY", "dev-secret-change-me")


def get_sentry_dsn() -> Optional[str]:
    return os.getenv("SENTRY_DSN") or None
