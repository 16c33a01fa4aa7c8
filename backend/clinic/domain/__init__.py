"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities and status enumerations
- interfaces.py: Repository and collaborator contracts
"""

from .entities import (
    Appointment,
    AppointmentStatus,
    Consultation,
    Doctor,
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    Medicine,
    Patient,
    Prescription,
    PrescriptionItem,
)
from .interfaces import (
    IAppointmentReader,
    IAppointmentRepository,
    IAppointmentWriter,
    IConsultationRepository,
    IDoctorRepository,
    IInvoiceDocumentRenderer,
    IInvoiceRepository,
    ILowStockNotifier,
    IMedicineReader,
    IMedicineRepository,
    IMedicineWriter,
    IPatientRepository,
    IPrescriptionRepository,
)

__all__ = [
    # Domain entities
    "Appointment",
    "AppointmentStatus",
    "Consultation",
    "Doctor",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "Medicine",
    "Patient",
    "Prescription",
    "PrescriptionItem",
    # Repository interfaces
    "IAppointmentRepository",
    "IConsultationRepository",
    "IDoctorRepository",
    "IInvoiceRepository",
    "IMedicineRepository",
    "IPatientRepository",
    "IPrescriptionRepository",
    # Segregated interfaces
    "IAppointmentReader",
    "IAppointmentWriter",
    "IMedicineReader",
    "IMedicineWriter",
    # Collaborators
    "IInvoiceDocumentRenderer",
    "ILowStockNotifier",
]
