import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from clinic.core.exceptions import (
    DUPLICATE_NAME_MESSAGE,
    ConflictError,
    InsufficientStockError,
    NotFoundError,
)
from clinic.db.base import Medicine as MedicineModel
from clinic.db.base import PrescriptionItem as PrescriptionItemModel
from clinic.domain.entities import Medicine
from clinic.domain.interfaces import IMedicineRepository

logger = logging.getLogger(__name__)


class MedicineRepository(IMedicineRepository):
    def __init__(self, db_session):
        self.db = db_session

    def get_by_id(self, medicine_id: int) -> Optional[Medicine]:
        db_med = self.db.get(MedicineModel, medicine_id)
        return self._to_domain(db_med) if db_med else None

    def list_all(self) -> List[Medicine]:
        rows = (
            self.db.query(MedicineModel)
            .order_by(MedicineModel.name.asc(), MedicineModel.id.asc())
            .all()
        )
        return [self._to_domain(r) for r in rows]

    def list_low_stock(self) -> List[Medicine]:
        rows = (
            self.db.query(MedicineModel)
            .filter(MedicineModel.quantity <= MedicineModel.minimum_threshold)
            .order_by(MedicineModel.name.asc(), MedicineModel.id.asc())
            .all()
        )
        return [self._to_domain(r) for r in rows]

    def active_name_exists(self, name: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(MedicineModel.id).filter(
            func.lower(MedicineModel.name) == name.strip().lower(),
            MedicineModel.is_active.is_(True),
        )
        if exclude_id is not None:
            query = query.filter(MedicineModel.id != exclude_id)
        return query.first() is not None

    def is_referenced(self, medicine_id: int) -> bool:
        return (
            self.db.query(PrescriptionItemModel.id)
            .filter(PrescriptionItemModel.medicine_id == medicine_id)
            .first()
            is not None
        )

    def count(self, low_stock_only: bool = False) -> int:
        query = self.db.query(MedicineModel)
        if low_stock_only:
            query = query.filter(
                MedicineModel.quantity <= MedicineModel.minimum_threshold
            )
        return query.count()

    def add(self, medicine: Medicine) -> Medicine:
        db_med = MedicineModel(
            name=medicine.name,
            description=medicine.description,
            unit=medicine.unit,
            quantity=medicine.quantity,
            minimum_threshold=medicine.minimum_threshold,
            price_per_unit=medicine.price_per_unit,
            is_active=medicine.is_active,
        )
        if medicine.created_at is not None:
            db_med.created_at = medicine.created_at
        self.db.add(db_med)
        self._flush(medicine)
        return self._to_domain(db_med)

    def update(self, medicine: Medicine) -> Medicine:
        db_med = self.db.get(MedicineModel, medicine.id)
        if not db_med:
            raise NotFoundError("Medicine not found.")
        db_med.name = medicine.name
        db_med.description = medicine.description
        db_med.unit = medicine.unit
        db_med.quantity = medicine.quantity
        db_med.minimum_threshold = medicine.minimum_threshold
        db_med.price_per_unit = medicine.price_per_unit
        db_med.is_active = medicine.is_active
        self._flush(medicine)
        return self._to_domain(db_med)

    def delete(self, medicine_id: int) -> None:
        db_med = self.db.get(MedicineModel, medicine_id)
        if db_med:
            self.db.delete(db_med)
            self.db.flush()

    def change_quantity(self, medicine_id: int, delta: int) -> Medicine:
        # Guarded UPDATE so two concurrent deductions cannot overdraw the stock
        updated = (
            self.db.query(MedicineModel)
            .filter(
                MedicineModel.id == medicine_id,
                MedicineModel.quantity + delta >= 0,
            )
            .update(
                {MedicineModel.quantity: MedicineModel.quantity + delta},
                synchronize_session=False,
            )
        )
        db_med = self.db.get(MedicineModel, medicine_id, populate_existing=True)
        if not db_med:
            raise NotFoundError("Medicine not found.")
        if not updated:
            raise InsufficientStockError(db_med.name, db_med.quantity)
        return self._to_domain(db_med)

    def _flush(self, medicine: Medicine) -> None:
        # uq_medicines_active_name settles concurrent writes of one active name
        try:
            self.db.flush()
        except IntegrityError as e:
            logger.warning(
                "Medicine name conflict",
                extra={"context": {"name": medicine.name, "error": str(e.orig)}},
            )
            raise ConflictError(DUPLICATE_NAME_MESSAGE) from e

    def _to_domain(self, db_med: MedicineModel) -> Medicine:
        return Medicine(
            id=db_med.id,
            name=db_med.name,
            description=db_med.description,
            unit=db_med.unit,
            quantity=db_med.quantity,
            minimum_threshold=db_med.minimum_threshold,
            price_per_unit=db_med.price_per_unit,
            is_active=db_med.is_active,
            created_at=db_med.created_at,
        )
