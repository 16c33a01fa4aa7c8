from typing import List, Optional

from clinic.db.base import Patient as PatientModel
from clinic.domain.entities import Patient
from clinic.domain.interfaces import IPatientRepository


class PatientRepository(IPatientRepository):
    def __init__(self, db_session):
        self.db = db_session

    def get_by_id(self, patient_id: int) -> Optional[Patient]:
        db_patient = self.db.get(PatientModel, patient_id)
        return self._to_domain(db_patient) if db_patient else None

    def list_all(self) -> List[Patient]:
        rows = self.db.query(PatientModel).order_by(PatientModel.full_name.asc()).all()
        return [self._to_domain(r) for r in rows]

    def create(self, patient: Patient) -> Patient:
        db_patient = PatientModel(
            full_name=patient.full_name,
            email=patient.email,
            phone_number=patient.phone_number,
            date_of_birth=patient.date_of_birth,
        )
        if patient.created_at is not None:
            db_patient.created_at = patient.created_at
        self.db.add(db_patient)
        self.db.flush()
        return self._to_domain(db_patient)

    def count(self) -> int:
        return self.db.query(PatientModel).count()

    def _to_domain(self, db_patient: PatientModel) -> Patient:
        return Patient(
            id=db_patient.id,
            full_name=db_patient.full_name,
            email=db_patient.email,
            phone_number=db_patient.phone_number,
            date_of_birth=db_patient.date_of_birth,
            created_at=db_patient.created_at,
        )
