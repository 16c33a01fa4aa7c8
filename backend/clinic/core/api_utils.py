"""
Common API utilities for consistent response formatting across all controllers.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from flask import jsonify, request

from clinic.core.exceptions import ValidationError


def error_response(message: str, status_code: int = 400) -> tuple:
    """
    Standardized error format for all endpoints: ``{"message": ...}``.

    Args:
        message: Human-readable message about the failure
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    return jsonify({"message": message}), status_code


def get_json_payload() -> dict:
    """Return the request JSON object or raise ValidationError."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def isoformat(value: Optional[Any]) -> Optional[str]:
    """Serialize a date/datetime for JSON, passing None through."""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def money(value: Optional[Decimal]) -> Optional[str]:
    """Serialize a monetary Decimal as a fixed two-place string."""
    if value is None:
        return None
    return f"{Decimal(value):.2f}"
