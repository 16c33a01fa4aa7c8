from typing import List, Optional

from sqlalchemy.orm import selectinload

from clinic.db.base import Medicine as MedicineModel
from clinic.db.base import Prescription as PrescriptionModel
from clinic.db.base import PrescriptionItem as PrescriptionItemModel
from clinic.domain.entities import Prescription, PrescriptionItem
from clinic.domain.interfaces import IPrescriptionRepository


class PrescriptionRepository(IPrescriptionRepository):
    def __init__(self, db_session):
        self.db = db_session

    def get_by_id(self, prescription_id: int) -> Optional[Prescription]:
        db_rx = (
            self.db.query(PrescriptionModel)
            .options(
                selectinload(PrescriptionModel.items).selectinload(
                    PrescriptionItemModel.medicine
                )
            )
            .filter(PrescriptionModel.id == prescription_id)
            .first()
        )
        return self._to_domain(db_rx) if db_rx else None

    def get_by_patient_id(self, patient_id: int) -> List[Prescription]:
        rows = (
            self.db.query(PrescriptionModel)
            .options(
                selectinload(PrescriptionModel.items).selectinload(
                    PrescriptionItemModel.medicine
                )
            )
            .filter(PrescriptionModel.patient_id == patient_id)
            .order_by(PrescriptionModel.created_at.desc(), PrescriptionModel.id.desc())
            .all()
        )
        return [self._to_domain(r) for r in rows]

    def create(self, prescription: Prescription) -> Prescription:
        db_rx = PrescriptionModel(
            appointment_id=prescription.appointment_id,
            doctor_id=prescription.doctor_id,
            patient_id=prescription.patient_id,
        )
        if prescription.created_at is not None:
            db_rx.created_at = prescription.created_at
        for item in prescription.items:
            db_rx.items.append(
                PrescriptionItemModel(
                    medicine_id=item.medicine_id,
                    quantity=item.quantity,
                    dosage=item.dosage,
                    instructions=item.instructions,
                )
            )
        self.db.add(db_rx)
        self.db.flush()
        return self._to_domain(db_rx)

    def _to_domain(self, db_rx: PrescriptionModel) -> Prescription:
        return Prescription(
            id=db_rx.id,
            appointment_id=db_rx.appointment_id,
            doctor_id=db_rx.doctor_id,
            patient_id=db_rx.patient_id,
            created_at=db_rx.created_at,
            items=[self._item_to_domain(i) for i in db_rx.items],
        )

    def _item_to_domain(self, db_item: PrescriptionItemModel) -> PrescriptionItem:
        medicine = db_item.medicine
        if medicine is None:
            medicine = self.db.get(MedicineModel, db_item.medicine_id)
        return PrescriptionItem(
            id=db_item.id,
            prescription_id=db_item.prescription_id,
            medicine_id=db_item.medicine_id,
            medicine_name=medicine.name if medicine else "",
            quantity=db_item.quantity,
            dosage=db_item.dosage,
            instructions=db_item.instructions,
        )
