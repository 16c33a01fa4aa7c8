"""
Inventory service: medicine catalogue and stock movements.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from clinic.core.config import utcnow
from clinic.core.exceptions import (
    DUPLICATE_NAME_MESSAGE,
    ConflictError,
    InsufficientStockError,
    InvalidStateError,
    NotFoundError,
)
from clinic.domain.entities import Medicine
from clinic.domain.interfaces import ILowStockNotifier, IMedicineRepository

logger = logging.getLogger(__name__)


class InventoryService:
    """Application service for medicine stock.

    Every write runs inside ``uow.atomic()``; low-stock notifications are
    queued with ``uow.on_commit`` so they only fire for committed stock.
    """

    def __init__(
        self,
        medicine_repo: IMedicineRepository,
        uow,
        notifier: ILowStockNotifier,
        clock=utcnow,
    ):
        self.medicine_repo = medicine_repo
        self.uow = uow
        self.notifier = notifier
        self.clock = clock

    def list_all(self) -> List[Medicine]:
        return self.medicine_repo.list_all()

    def get(self, medicine_id: int) -> Medicine:
        medicine = self.medicine_repo.get_by_id(medicine_id)
        if not medicine:
            raise NotFoundError("Medicine not found.")
        return medicine

    def get_low_stock(self) -> List[Medicine]:
        return self.medicine_repo.list_low_stock()

    def create(
        self,
        name: str,
        quantity: int,
        minimum_threshold: int,
        price_per_unit: Decimal,
        description: Optional[str] = None,
        unit: Optional[str] = None,
    ) -> Medicine:
        with self.uow.atomic():
            if self.medicine_repo.active_name_exists(name):
                raise ConflictError(DUPLICATE_NAME_MESSAGE)
            medicine = self.medicine_repo.add(
                Medicine(
                    name=name,
                    description=description,
                    unit=unit,
                    quantity=quantity,
                    minimum_threshold=minimum_threshold,
                    price_per_unit=price_per_unit,
                    is_active=True,
                    created_at=self.clock(),
                )
            )
            self._check_low_stock(medicine)
        logger.info(
            "Medicine created",
            extra={"context": {"medicine_id": medicine.id, "name": medicine.name}},
        )
        return medicine

    def update(
        self,
        medicine_id: int,
        name: str,
        quantity: int,
        minimum_threshold: int,
        price_per_unit: Decimal,
        description: Optional[str] = None,
        unit: Optional[str] = None,
        is_active: bool = True,
    ) -> Medicine:
        """Overwrite every mutable field of a medicine."""
        with self.uow.atomic():
            existing = self.get(medicine_id)
            if is_active and self.medicine_repo.active_name_exists(
                name, exclude_id=medicine_id
            ):
                raise ConflictError(DUPLICATE_NAME_MESSAGE)
            existing.name = name
            existing.description = description
            existing.unit = unit
            existing.quantity = quantity
            existing.minimum_threshold = minimum_threshold
            existing.price_per_unit = price_per_unit
            existing.is_active = is_active
            medicine = self.medicine_repo.update(existing)
            self._check_low_stock(medicine)
        return medicine

    def delete(self, medicine_id: int) -> None:
        with self.uow.atomic():
            self.get(medicine_id)
            if self.medicine_repo.is_referenced(medicine_id):
                raise InvalidStateError(
                    "Medicine is referenced by existing prescriptions and cannot be deleted."
                )
            self.medicine_repo.delete(medicine_id)
        logger.info("Medicine deleted", extra={"context": {"medicine_id": medicine_id}})

    def deduct_stock(self, medicine_id: int, quantity: int) -> Medicine:
        """Remove ``quantity`` units from stock.

        Raises NotFoundError, InvalidStateError (quantity <= 0) or
        InsufficientStockError; the stock is untouched on failure.
        """
        with self.uow.atomic():
            medicine = self.get(medicine_id)
            if quantity <= 0:
                raise InvalidStateError("Quantity must be greater than zero.")
            if medicine.quantity < quantity:
                raise InsufficientStockError(medicine.name, medicine.quantity)
            updated = self.medicine_repo.change_quantity(medicine_id, -quantity)
            self._check_low_stock(updated)
        logger.info(
            "Stock deducted",
            extra={
                "context": {
                    "medicine_id": medicine_id,
                    "quantity": quantity,
                    "remaining": updated.quantity,
                }
            },
        )
        return updated

    def _check_low_stock(self, medicine: Medicine) -> None:
        if medicine.is_low_stock():
            self.uow.on_commit(lambda: self.notifier.notify(medicine))
