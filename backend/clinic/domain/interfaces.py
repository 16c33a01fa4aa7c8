"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces define contracts without implementation details,
enabling dependency injection and easier testing.

Repository writes only stage changes (they flush so generated ids are
available); committing belongs to the unit of work.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from .entities import (
    Appointment,
    AppointmentStatus,
    Consultation,
    Doctor,
    Invoice,
    InvoiceStatus,
    Medicine,
    Patient,
    Prescription,
)


class IPatientRepository(ABC):
    """Patient persistence contract."""

    @abstractmethod
    def get_by_id(self, patient_id: int) -> Optional[Patient]:
        """Get patient by ID."""
        pass

    @abstractmethod
    def list_all(self) -> List[Patient]:
        """List patients ordered by name."""
        pass

    @abstractmethod
    def create(self, patient: Patient) -> Patient:
        """Create a new patient."""
        pass

    @abstractmethod
    def count(self) -> int:
        pass


class IDoctorRepository(ABC):
    """Doctor persistence contract."""

    @abstractmethod
    def get_by_id(self, doctor_id: int) -> Optional[Doctor]:
        """Get doctor by ID."""
        pass

    @abstractmethod
    def list_all(self) -> List[Doctor]:
        """List doctors ordered by name."""
        pass

    @abstractmethod
    def create(self, doctor: Doctor) -> Doctor:
        """Create a new doctor."""
        pass

    @abstractmethod
    def count(self) -> int:
        pass


class IAppointmentReader(ABC):
    """Interface for appointment read operations."""

    @abstractmethod
    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        """Get appointment by ID."""
        pass

    @abstractmethod
    def get_by_doctor_id(self, doctor_id: int) -> List[Appointment]:
        """Appointments for a doctor, most recent scheduled_at first."""
        pass

    @abstractmethod
    def get_by_patient_id(self, patient_id: int) -> List[Appointment]:
        """Appointments for a patient, most recent scheduled_at first."""
        pass

    @abstractmethod
    def has_active_booking(self, doctor_id: int, scheduled_at: datetime) -> bool:
        """True if the doctor holds a non-rejected appointment at exactly scheduled_at."""
        pass

    @abstractmethod
    def count(
        self,
        status: Optional[AppointmentStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        """Count appointments, optionally by status and scheduled_at window [start, end)."""
        pass


class IAppointmentWriter(ABC):
    """Interface for appointment write operations."""

    @abstractmethod
    def create(self, appointment: Appointment) -> Appointment:
        """Create a new appointment."""
        pass

    @abstractmethod
    def update(self, appointment: Appointment) -> Appointment:
        """Update an existing appointment."""
        pass


class IAppointmentRepository(IAppointmentReader, IAppointmentWriter):
    """Complete appointment repository interface."""

    pass


class IConsultationRepository(ABC):
    @abstractmethod
    def get_by_appointment_id(self, appointment_id: int) -> Optional[Consultation]:
        pass

    @abstractmethod
    def exists_for_appointment(self, appointment_id: int) -> bool:
        pass

    @abstractmethod
    def create(self, consultation: Consultation) -> Consultation:
        pass


class IMedicineReader(ABC):
    """Interface for medicine read operations."""

    @abstractmethod
    def get_by_id(self, medicine_id: int) -> Optional[Medicine]:
        """Get medicine by ID."""
        pass

    @abstractmethod
    def list_all(self) -> List[Medicine]:
        """List medicines ordered by name."""
        pass

    @abstractmethod
    def list_low_stock(self) -> List[Medicine]:
        """Medicines with quantity <= minimum_threshold."""
        pass

    @abstractmethod
    def active_name_exists(self, name: str, exclude_id: Optional[int] = None) -> bool:
        """True if an active medicine already uses this name."""
        pass

    @abstractmethod
    def is_referenced(self, medicine_id: int) -> bool:
        """True if any prescription item references the medicine."""
        pass

    @abstractmethod
    def count(self, low_stock_only: bool = False) -> int:
        pass


class IMedicineWriter(ABC):
    """Interface for medicine write operations."""

    @abstractmethod
    def add(self, medicine: Medicine) -> Medicine:
        pass

    @abstractmethod
    def update(self, medicine: Medicine) -> Medicine:
        pass

    @abstractmethod
    def delete(self, medicine_id: int) -> None:
        pass

    @abstractmethod
    def change_quantity(self, medicine_id: int, delta: int) -> Medicine:
        """Apply a stock delta and return the updated medicine."""
        pass


class IMedicineRepository(IMedicineReader, IMedicineWriter):
    """Complete medicine repository interface."""

    pass


class IPrescriptionRepository(ABC):
    @abstractmethod
    def get_by_id(self, prescription_id: int) -> Optional[Prescription]:
        pass

    @abstractmethod
    def get_by_patient_id(self, patient_id: int) -> List[Prescription]:
        pass

    @abstractmethod
    def create(self, prescription: Prescription) -> Prescription:
        """Persist the header and all items."""
        pass


class IInvoiceRepository(ABC):
    @abstractmethod
    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        pass

    @abstractmethod
    def create(self, invoice: Invoice) -> Invoice:
        """Persist the invoice and its items; assigns ids and created_at."""
        pass

    @abstractmethod
    def update(self, invoice: Invoice) -> Invoice:
        """Persist status, paid_at, total and document changes."""
        pass

    @abstractmethod
    def count(self, status: Optional[InvoiceStatus] = None) -> int:
        pass

    @abstractmethod
    def sum_total(self, status: InvoiceStatus) -> Decimal:
        pass


class ILowStockNotifier(ABC):
    """Receives low-stock events (logging, alerting, ...)."""

    @abstractmethod
    def notify(self, medicine: Medicine) -> None:
        pass


class IInvoiceDocumentRenderer(ABC):
    """Renders an invoice into a printable document payload."""

    @abstractmethod
    def render(self, invoice: Invoice, patient: Patient) -> bytes:
        pass
