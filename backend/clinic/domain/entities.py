"""
Domain entities - Pure business logic, no framework dependencies.

Following SOLID principles:
- Single Responsibility: Each entity represents one business concept
- Open/Closed: Entities can be extended without modification

Entities are plain dataclasses. Repositories map SQLAlchemy rows onto them,
so the rules layer never touches ORM objects or lazy relationships.
"""

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


class AppointmentStatus(enum.Enum):
    """Lifecycle of an appointment. Completed is terminal."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, value: str) -> "AppointmentStatus":
        """Resolve a status from its name, case-insensitively."""
        for status in cls:
            if status.value.lower() == str(value).strip().lower():
                return status
        raise ValueError(f"Unknown appointment status: {value}")


# Statuses that allow clinical records (consultations, prescriptions)
CLINICAL_STATUSES = (AppointmentStatus.APPROVED, AppointmentStatus.COMPLETED)


class InvoiceStatus(enum.Enum):
    UNPAID = "Unpaid"
    PAID = "Paid"


@dataclass
class Patient:
    """Domain entity representing a Patient."""

    id: Optional[int] = None
    full_name: str = ""
    email: str = ""
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate domain rules."""
        if not self.full_name:
            raise ValueError("Full name is required")
        if self.email and "@" not in self.email:
            raise ValueError("Invalid email format")


@dataclass
class Doctor:
    """Domain entity representing a Doctor."""

    id: Optional[int] = None
    full_name: str = ""
    specialization: str = ""
    email: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.full_name:
            raise ValueError("Full name is required")


@dataclass
class Appointment:
    """Domain entity for Appointment business logic."""

    id: Optional[int] = None
    doctor_id: int = 0
    patient_id: int = 0
    scheduled_at: Optional[datetime] = None
    reason: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.PENDING
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if self.doctor_id <= 0:
            raise ValueError("Valid doctor_id is required")
        if self.patient_id <= 0:
            raise ValueError("Valid patient_id is required")

    @property
    def is_terminal(self) -> bool:
        return self.status == AppointmentStatus.COMPLETED

    @property
    def allows_clinical_records(self) -> bool:
        """Consultations and prescriptions need an approved or completed visit."""
        return self.status in CLINICAL_STATUSES


@dataclass
class Consultation:
    id: Optional[int] = None
    appointment_id: int = 0
    diagnosis: Optional[str] = None
    observations: Optional[str] = None
    notes: Optional[str] = None
    test_recommendations: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class Medicine:
    """Domain entity for medicine stock management."""

    name: str = ""
    quantity: int = 0
    minimum_threshold: int = 0
    price_per_unit: Decimal = Decimal("0.00")
    description: Optional[str] = None
    unit: Optional[str] = None
    is_active: bool = True
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if self.quantity < 0:
            raise ValueError("Quantity cannot be negative")
        if self.minimum_threshold < 0:
            raise ValueError("Minimum threshold cannot be negative")

    def is_low_stock(self) -> bool:
        return self.quantity <= self.minimum_threshold


@dataclass
class PrescriptionItem:
    medicine_id: int = 0
    quantity: int = 0
    dosage: Optional[str] = None
    instructions: Optional[str] = None
    medicine_name: str = ""
    id: Optional[int] = None
    prescription_id: Optional[int] = None


@dataclass
class Prescription:
    appointment_id: int = 0
    doctor_id: int = 0
    patient_id: int = 0
    items: List[PrescriptionItem] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class InvoiceItem:
    description: str = ""
    quantity: int = 1
    unit_price: Decimal = Decimal("0.00")
    id: Optional[int] = None
    invoice_id: Optional[int] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class Invoice:
    appointment_id: int = 0
    patient_id: int = 0
    items: List[InvoiceItem] = field(default_factory=list)
    total_amount: Decimal = Decimal("0.00")
    status: InvoiceStatus = InvoiceStatus.UNPAID
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    document: Optional[bytes] = None

    def calculate_total(self) -> Decimal:
        """Sum of unit_price x quantity over all line items."""
        return sum((item.line_total for item in self.items), Decimal("0.00"))

    @property
    def has_document(self) -> bool:
        return bool(self.document)
