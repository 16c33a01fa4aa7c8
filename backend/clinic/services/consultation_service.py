"""
Consultation service: clinical notes attached to an appointment.
"""

import logging
from typing import Optional

from clinic.core.config import utcnow
from clinic.core.exceptions import ConflictError, InvalidStateError, NotFoundError
from clinic.domain.entities import Consultation
from clinic.domain.interfaces import IAppointmentRepository, IConsultationRepository

logger = logging.getLogger(__name__)


class ConsultationService:
    def __init__(
        self,
        consultation_repo: IConsultationRepository,
        appointment_repo: IAppointmentRepository,
        uow,
        clock=utcnow,
    ):
        self.consultation_repo = consultation_repo
        self.appointment_repo = appointment_repo
        self.uow = uow
        self.clock = clock

    def create(
        self,
        appointment_id: int,
        diagnosis: Optional[str] = None,
        observations: Optional[str] = None,
        notes: Optional[str] = None,
        test_recommendations: Optional[str] = None,
    ) -> Consultation:
        """Record the consultation for an approved or completed appointment.

        At most one consultation exists per appointment.
        """
        with self.uow.atomic():
            appointment = self.appointment_repo.get_by_id(appointment_id)
            if not appointment:
                raise NotFoundError("Appointment not found.")
            if not appointment.allows_clinical_records:
                raise InvalidStateError(
                    "Consultation can only be added to approved or completed appointments."
                )
            if self.consultation_repo.exists_for_appointment(appointment_id):
                raise ConflictError("Consultation already exists for this appointment.")

            consultation = self.consultation_repo.create(
                Consultation(
                    appointment_id=appointment_id,
                    diagnosis=diagnosis,
                    observations=observations,
                    notes=notes,
                    test_recommendations=test_recommendations,
                    created_at=self.clock(),
                )
            )
        logger.info(
            "Consultation recorded",
            extra={
                "context": {
                    "consultation_id": consultation.id,
                    "appointment_id": appointment_id,
                }
            },
        )
        return consultation

    def get_for_appointment(self, appointment_id: int) -> Consultation:
        consultation = self.consultation_repo.get_by_appointment_id(appointment_id)
        if not consultation:
            raise NotFoundError("Consultation not found.")
        return consultation
