from typing import List, Optional

from clinic.db.base import Doctor as DoctorModel
from clinic.domain.entities import Doctor
from clinic.domain.interfaces import IDoctorRepository


class DoctorRepository(IDoctorRepository):
    def __init__(self, db_session):
        self.db = db_session

    def get_by_id(self, doctor_id: int) -> Optional[Doctor]:
        db_doctor = self.db.get(DoctorModel, doctor_id)
        return self._to_domain(db_doctor) if db_doctor else None

    def list_all(self) -> List[Doctor]:
        rows = self.db.query(DoctorModel).order_by(DoctorModel.full_name.asc()).all()
        return [self._to_domain(r) for r in rows]

    def create(self, doctor: Doctor) -> Doctor:
        db_doctor = DoctorModel(
            full_name=doctor.full_name,
            specialization=doctor.specialization,
            email=doctor.email,
            phone_number=doctor.phone_number,
        )
        if doctor.created_at is not None:
            db_doctor.created_at = doctor.created_at
        self.db.add(db_doctor)
        self.db.flush()
        return self._to_domain(db_doctor)

    def count(self) -> int:
        return self.db.query(DoctorModel).count()

    def _to_domain(self, db_doctor: DoctorModel) -> Doctor:
        return Doctor(
            id=db_doctor.id,
            full_name=db_doctor.full_name,
            specialization=db_doctor.specialization,
            email=db_doctor.email,
            phone_number=db_doctor.phone_number,
            created_at=db_doctor.created_at,
        )
