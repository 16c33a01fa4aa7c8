from typing import Optional

from sqlalchemy.exc import IntegrityError

from clinic.core.exceptions import ConflictError
from clinic.db.base import Consultation as ConsultationModel
from clinic.domain.entities import Consultation
from clinic.domain.interfaces import IConsultationRepository


class ConsultationRepository(IConsultationRepository):
    def __init__(self, db_session):
        self.db = db_session

    def get_by_appointment_id(self, appointment_id: int) -> Optional[Consultation]:
        db_consultation = (
            self.db.query(ConsultationModel)
            .filter(ConsultationModel.appointment_id == appointment_id)
            .first()
        )
        return self._to_domain(db_consultation) if db_consultation else None

    def exists_for_appointment(self, appointment_id: int) -> bool:
        return (
            self.db.query(ConsultationModel.id)
            .filter(ConsultationModel.appointment_id == appointment_id)
            .first()
            is not None
        )

    def create(self, consultation: Consultation) -> Consultation:
        db_consultation = ConsultationModel(
            appointment_id=consultation.appointment_id,
            diagnosis=consultation.diagnosis,
            observations=consultation.observations,
            notes=consultation.notes,
            test_recommendations=consultation.test_recommendations,
        )
        if consultation.created_at is not None:
            db_consultation.created_at = consultation.created_at
        self.db.add(db_consultation)
        try:
            self.db.flush()
        except IntegrityError as e:
            raise ConflictError(
                "Consultation already exists for this appointment."
            ) from e
        return self._to_domain(db_consultation)

    def _to_domain(self, db_consultation: ConsultationModel) -> Consultation:
        return Consultation(
            id=db_consultation.id,
            appointment_id=db_consultation.appointment_id,
            diagnosis=db_consultation.diagnosis,
            observations=db_consultation.observations,
            notes=db_consultation.notes,
            test_recommendations=db_consultation.test_recommendations,
            created_at=db_consultation.created_at,
        )
