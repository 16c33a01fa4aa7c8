"""
Low-stock notification.

The notifier is invoked after the transaction that lowered the stock has
committed, so a rolled-back deduction never produces an alert.
"""

import logging
from typing import Optional

from clinic.core import config
from clinic.domain.entities import Medicine
from clinic.domain.interfaces import ILowStockNotifier

logger = logging.getLogger(__name__)


class LoggingLowStockNotifier(ILowStockNotifier):
    """Emits a structured warning for each medicine at or under its threshold."""

    def __init__(self, enabled: Optional[bool] = None):
        self.enabled = (
            config.get_low_stock_alerts_enabled() if enabled is None else enabled
        )

    def notify(self, medicine: Medicine) -> None:
        if not self.enabled:
            logger.debug(
                "Low-stock alert suppressed (alerts disabled)",
                extra={"context": {"medicine_id": medicine.id}},
            )
            return
        logger.warning(
            "Low stock",
            extra={
                "context": {
                    "medicine_id": medicine.id,
                    "medicine_name": medicine.name,
                    "quantity": medicine.quantity,
                    "minimum_threshold": medicine.minimum_threshold,
                }
            },
        )
