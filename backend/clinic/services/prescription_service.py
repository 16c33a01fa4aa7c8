"""
Prescription service.

A prescription dispenses stock: every item is deducted through the
InventoryService inside the same transaction as the prescription rows, so a
failing item leaves neither a prescription nor any deduction behind.
"""

import logging
from typing import List

from clinic.core.config import utcnow
from clinic.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from clinic.domain.entities import Prescription, PrescriptionItem
from clinic.domain.interfaces import (
    IAppointmentRepository,
    IDoctorRepository,
    IPatientRepository,
    IPrescriptionRepository,
)
from clinic.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)


class PrescriptionService:
    def __init__(
        self,
        prescription_repo: IPrescriptionRepository,
        appointment_repo: IAppointmentRepository,
        doctor_repo: IDoctorRepository,
        patient_repo: IPatientRepository,
        inventory_service: InventoryService,
        uow,
        clock=utcnow,
    ):
        self.prescription_repo = prescription_repo
        self.appointment_repo = appointment_repo
        self.doctor_repo = doctor_repo
        self.patient_repo = patient_repo
        self.inventory_service = inventory_service
        self.uow = uow
        self.clock = clock

    def create(
        self,
        appointment_id: int,
        doctor_id: int,
        patient_id: int,
        items: List[PrescriptionItem],
    ) -> Prescription:
        """Create a prescription and deduct stock for each item, all or nothing.

        Raises:
            NotFoundError: appointment, doctor, patient or a medicine is absent
            InvalidStateError: appointment not approved/completed, or it belongs
                to another doctor/patient
            InsufficientStockError: an item exceeds the available stock
        """
        if not items:
            raise ValidationError("At least one prescription item is required")

        with self.uow.atomic():
            appointment = self.appointment_repo.get_by_id(appointment_id)
            if not appointment:
                raise NotFoundError("Appointment not found.")
            if not self.doctor_repo.get_by_id(doctor_id):
                raise NotFoundError("Doctor not found.")
            if not self.patient_repo.get_by_id(patient_id):
                raise NotFoundError("Patient not found.")
            if not appointment.allows_clinical_records:
                raise InvalidStateError(
                    "Prescription can only be created for approved or completed appointments."
                )
            if (
                appointment.doctor_id != doctor_id
                or appointment.patient_id != patient_id
            ):
                raise InvalidStateError(
                    "Appointment must belong to the same doctor and patient."
                )

            dispensed = []
            for item in items:
                medicine = self.inventory_service.deduct_stock(
                    item.medicine_id, item.quantity
                )
                dispensed.append(
                    PrescriptionItem(
                        medicine_id=medicine.id,
                        medicine_name=medicine.name,
                        quantity=item.quantity,
                        dosage=item.dosage,
                        instructions=item.instructions,
                    )
                )

            prescription = self.prescription_repo.create(
                Prescription(
                    appointment_id=appointment_id,
                    doctor_id=doctor_id,
                    patient_id=patient_id,
                    items=dispensed,
                    created_at=self.clock(),
                )
            )
        logger.info(
            "Prescription created",
            extra={
                "context": {
                    "prescription_id": prescription.id,
                    "appointment_id": appointment_id,
                    "items": len(dispensed),
                }
            },
        )
        return prescription

    def get(self, prescription_id: int) -> Prescription:
        prescription = self.prescription_repo.get_by_id(prescription_id)
        if not prescription:
            raise NotFoundError("Prescription not found.")
        return prescription

    def list_for_patient(self, patient_id: int) -> List[Prescription]:
        if not self.patient_repo.get_by_id(patient_id):
            raise NotFoundError("Patient not found.")
        return self.prescription_repo.get_by_patient_id(patient_id)
