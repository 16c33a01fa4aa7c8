import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from clinic.core.exceptions import (
    DOUBLE_BOOKING_MESSAGE,
    ConflictError,
    NotFoundError,
)
from clinic.db.base import Appointment as AppointmentModel
from clinic.domain.entities import Appointment, AppointmentStatus
from clinic.domain.interfaces import IAppointmentRepository

logger = logging.getLogger(__name__)


class AppointmentRepository(IAppointmentRepository):
    def __init__(self, db_session):
        self.db = db_session

    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        db_appt = self.db.get(AppointmentModel, appointment_id)
        return self._to_domain(db_appt) if db_appt else None

    def get_by_doctor_id(self, doctor_id: int) -> List[Appointment]:
        rows = (
            self.db.query(AppointmentModel)
            .filter(AppointmentModel.doctor_id == doctor_id)
            .order_by(AppointmentModel.scheduled_at.desc(), AppointmentModel.id.desc())
            .all()
        )
        return [self._to_domain(r) for r in rows]

    def get_by_patient_id(self, patient_id: int) -> List[Appointment]:
        rows = (
            self.db.query(AppointmentModel)
            .filter(AppointmentModel.patient_id == patient_id)
            .order_by(AppointmentModel.scheduled_at.desc(), AppointmentModel.id.desc())
            .all()
        )
        return [self._to_domain(r) for r in rows]

    def has_active_booking(self, doctor_id: int, scheduled_at: datetime) -> bool:
        return (
            self.db.query(AppointmentModel.id)
            .filter(
                AppointmentModel.doctor_id == doctor_id,
                AppointmentModel.scheduled_at == scheduled_at,
                AppointmentModel.status != AppointmentStatus.REJECTED.value,
            )
            .first()
            is not None
        )

    def count(
        self,
        status: Optional[AppointmentStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        query = self.db.query(AppointmentModel)
        if status is not None:
            query = query.filter(AppointmentModel.status == status.value)
        if start is not None:
            query = query.filter(AppointmentModel.scheduled_at >= start)
        if end is not None:
            query = query.filter(AppointmentModel.scheduled_at < end)
        return query.count()

    def create(self, appointment: Appointment) -> Appointment:
        db_appt = AppointmentModel(
            doctor_id=appointment.doctor_id,
            patient_id=appointment.patient_id,
            scheduled_at=appointment.scheduled_at,
            reason=appointment.reason,
            status=appointment.status.value,
            completed_at=appointment.completed_at,
        )
        if appointment.created_at is not None:
            db_appt.created_at = appointment.created_at
        self.db.add(db_appt)
        self._flush(appointment)
        return self._to_domain(db_appt)

    def update(self, appointment: Appointment) -> Appointment:
        db_appt = self.db.get(AppointmentModel, appointment.id)
        if not db_appt:
            raise NotFoundError("Appointment not found.")
        db_appt.reason = appointment.reason
        db_appt.status = appointment.status.value
        db_appt.completed_at = appointment.completed_at
        self._flush(appointment)
        return self._to_domain(db_appt)

    def _flush(self, appointment: Appointment) -> None:
        # The partial unique index settles concurrent bookings of one slot
        try:
            self.db.flush()
        except IntegrityError as e:
            logger.warning(
                "Appointment slot conflict",
                extra={
                    "context": {
                        "doctor_id": appointment.doctor_id,
                        "scheduled_at": str(appointment.scheduled_at),
                        "error": str(e.orig),
                    }
                },
            )
            raise ConflictError(DOUBLE_BOOKING_MESSAGE) from e

    def _to_domain(self, db_appt: AppointmentModel) -> Appointment:
        return Appointment(
            id=db_appt.id,
            doctor_id=db_appt.doctor_id,
            patient_id=db_appt.patient_id,
            scheduled_at=db_appt.scheduled_at,
            reason=db_appt.reason,
            status=AppointmentStatus(db_appt.status),
            created_at=db_appt.created_at,
            completed_at=db_appt.completed_at,
        )
