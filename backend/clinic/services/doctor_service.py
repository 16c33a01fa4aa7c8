from typing import List, Optional

from clinic.core.config import utcnow
from clinic.core.exceptions import NotFoundError
from clinic.domain.entities import Doctor
from clinic.domain.interfaces import IDoctorRepository


class DoctorService:
    def __init__(self, doctor_repo: IDoctorRepository, uow, clock=utcnow):
        self.doctor_repo = doctor_repo
        self.uow = uow
        self.clock = clock

    def create(
        self,
        full_name: str,
        specialization: str,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> Doctor:
        with self.uow.atomic():
            return self.doctor_repo.create(
                Doctor(
                    full_name=full_name,
                    specialization=specialization,
                    email=email,
                    phone_number=phone_number,
                    created_at=self.clock(),
                )
            )

    def get(self, doctor_id: int) -> Doctor:
        doctor = self.doctor_repo.get_by_id(doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found.")
        return doctor

    def list_all(self) -> List[Doctor]:
        return self.doctor_repo.list_all()
