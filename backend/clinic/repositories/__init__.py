from .appointment_repo import AppointmentRepository
from .consultation_repo import ConsultationRepository
from .doctor_repo import DoctorRepository
from .invoice_repo import InvoiceRepository
from .medicine_repo import MedicineRepository
from .patient_repo import PatientRepository
from .prescription_repo import PrescriptionRepository

__all__ = [
    "AppointmentRepository",
    "ConsultationRepository",
    "DoctorRepository",
    "InvoiceRepository",
    "MedicineRepository",
    "PatientRepository",
    "PrescriptionRepository",
]
