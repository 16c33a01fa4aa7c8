from datetime import date
from typing import List, Optional

from clinic.core.config import utcnow
from clinic.core.exceptions import NotFoundError
from clinic.domain.entities import Patient
from clinic.domain.interfaces import IPatientRepository


class PatientService:
    def __init__(self, patient_repo: IPatientRepository, uow, clock=utcnow):
        self.patient_repo = patient_repo
        self.uow = uow
        self.clock = clock

    def create(
        self,
        full_name: str,
        email: str,
        phone_number: Optional[str] = None,
        date_of_birth: Optional[date] = None,
    ) -> Patient:
        with self.uow.atomic():
            return self.patient_repo.create(
                Patient(
                    full_name=full_name,
                    email=email,
                    phone_number=phone_number,
                    date_of_birth=date_of_birth,
                    created_at=self.clock(),
                )
            )

    def get(self, patient_id: int) -> Patient:
        patient = self.patient_repo.get_by_id(patient_id)
        if not patient:
            raise NotFoundError("Patient not found.")
        return patient

    def list_all(self) -> List[Patient]:
        return self.patient_repo.list_all()
