"""
Appointment service following SOLID principles.
"""

import logging
from datetime import datetime
from typing import List, Optional

from clinic.core.config import utcnow
from clinic.core.exceptions import (
    DOUBLE_BOOKING_MESSAGE,
    ConflictError,
    InvalidStateError,
    NotFoundError,
)
from clinic.domain.entities import Appointment, AppointmentStatus
from clinic.domain.interfaces import (
    IAppointmentRepository,
    IDoctorRepository,
    IPatientRepository,
)

logger = logging.getLogger(__name__)

# Targets accepted by update_status; Pending is only ever the initial state
TRANSITION_TARGETS = (
    AppointmentStatus.APPROVED,
    AppointmentStatus.REJECTED,
    AppointmentStatus.COMPLETED,
)


class AppointmentService:
    """Application service for appointment-related use-cases.

    This service demonstrates:
    - Single Responsibility: Handles only appointment business logic
    - Dependency Inversion: Depends on interfaces, not concrete implementations
    """

    def __init__(
        self,
        appointment_repo: IAppointmentRepository,
        doctor_repo: IDoctorRepository,
        patient_repo: IPatientRepository,
        uow,
        clock=utcnow,
    ):
        self.appointment_repo = appointment_repo
        self.doctor_repo = doctor_repo
        self.patient_repo = patient_repo
        self.uow = uow
        self.clock = clock

    def create(
        self,
        doctor_id: int,
        patient_id: int,
        scheduled_at: datetime,
        reason: Optional[str] = None,
    ) -> Appointment:
        """Book an appointment with business rule validation.

        Business Rules:
        - Doctor and patient must exist
        - Appointment must be strictly in the future
        - No double booking: one non-rejected appointment per doctor per instant
        """
        with self.uow.atomic():
            if not self.doctor_repo.get_by_id(doctor_id):
                raise NotFoundError("Doctor not found.")
            if not self.patient_repo.get_by_id(patient_id):
                raise NotFoundError("Patient not found.")

            now = self.clock()
            if scheduled_at <= now:
                raise InvalidStateError("Appointment time must be in the future.")

            if self.appointment_repo.has_active_booking(doctor_id, scheduled_at):
                raise ConflictError(DOUBLE_BOOKING_MESSAGE)

            appointment = self.appointment_repo.create(
                Appointment(
                    doctor_id=doctor_id,
                    patient_id=patient_id,
                    scheduled_at=scheduled_at,
                    reason=reason,
                    status=AppointmentStatus.PENDING,
                    created_at=now,
                )
            )
        logger.info(
            "Appointment created",
            extra={
                "context": {
                    "appointment_id": appointment.id,
                    "doctor_id": doctor_id,
                    "patient_id": patient_id,
                    "scheduled_at": scheduled_at.isoformat(),
                }
            },
        )
        return appointment

    def get(self, appointment_id: int) -> Appointment:
        appointment = self.appointment_repo.get_by_id(appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found.")
        return appointment

    def update_status(
        self, appointment_id: int, new_status: AppointmentStatus
    ) -> Appointment:
        """Move an appointment to Approved, Rejected or Completed.

        Completed is terminal. Approved and Rejected may be swapped freely.
        """
        if new_status not in TRANSITION_TARGETS:
            raise InvalidStateError("Unsupported status transition.")

        with self.uow.atomic():
            appointment = self.get(appointment_id)
            if appointment.is_terminal:
                raise InvalidStateError("Completed appointments cannot be updated.")

            previous = appointment.status
            appointment.status = new_status
            if new_status == AppointmentStatus.COMPLETED:
                appointment.completed_at = self.clock()
            appointment = self.appointment_repo.update(appointment)
        logger.info(
            "Appointment status changed",
            extra={
                "context": {
                    "appointment_id": appointment_id,
                    "from": previous.value,
                    "to": new_status.value,
                }
            },
        )
        return appointment

    def list_for_doctor(self, doctor_id: int) -> List[Appointment]:
        if not self.doctor_repo.get_by_id(doctor_id):
            raise NotFoundError("Doctor not found.")
        return self.appointment_repo.get_by_doctor_id(doctor_id)

    def list_for_patient(self, patient_id: int) -> List[Appointment]:
        if not self.patient_repo.get_by_id(patient_id):
            raise NotFoundError("Patient not found.")
        return self.appointment_repo.get_by_patient_id(patient_id)
