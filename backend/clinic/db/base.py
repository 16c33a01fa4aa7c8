from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    Numeric,
    String,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .session import Base
from clinic.core.config import utcnow


class Patient(Base):
    """Patient model for database persistence"""

    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    full_name: Mapped[str] = mapped_column(String(150), nullable=False)
    email: Mapped[str] = mapped_column(String(200), nullable=False)
    phone_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    def __repr__(self):
        return f"<Patient(id={self.id}, full_name='{self.full_name}')>"


class Doctor(Base):
    """Doctor model for database persistence"""

    __tablename__ = "doctors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    full_name: Mapped[str] = mapped_column(String(150), nullable=False)
    specialization: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    def __repr__(self):
        return f"<Doctor(id={self.id}, full_name='{self.full_name}')>"


class Appointment(Base):
    """Appointment between a doctor and a patient at a fixed instant (naive UTC)."""

    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    doctor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("doctors.id"), nullable=False, index=True
    )
    patient_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("patients.id"), nullable=False, index=True
    )
    scheduled_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="Pending"
    )  # Pending, Approved, Rejected, Completed
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    doctor: Mapped["Doctor"] = relationship("Doctor", foreign_keys=[doctor_id])
    patient: Mapped["Patient"] = relationship("Patient", foreign_keys=[patient_id])

    __table_args__ = (
        # One live booking per doctor per instant; rejected slots can be rebooked
        Index(
            "uq_appointments_doctor_slot_active",
            "doctor_id",
            "scheduled_at",
            unique=True,
            sqlite_where=text("status != 'Rejected'"),
            postgresql_where=text("status != 'Rejected'"),
        ),
    )

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, doctor_id={self.doctor_id}, "
            f"patient_id={self.patient_id}, scheduled_at={self.scheduled_at}, status={self.status})>"
        )


class Consultation(Base):
    """Clinical notes for an appointment (at most one per appointment)."""

    __tablename__ = "consultations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    appointment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("appointments.id"), nullable=False, unique=True
    )
    diagnosis: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    observations: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    test_recommendations: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    def __repr__(self):
        return f"<Consultation(id={self.id}, appointment_id={self.appointment_id})>"


class Medicine(Base):
    """Medicine stock record"""

    __tablename__ = "medicines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(180), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    unit: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    minimum_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price_per_unit: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, default=Decimal("0.00")
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    def __repr__(self):
        return f"<Medicine(id={self.id}, name='{self.name}', quantity={self.quantity})>"


# Active names are unique regardless of case
Index(
    "uq_medicines_active_name",
    func.lower(Medicine.name),
    unique=True,
    sqlite_where=text("is_active = 1"),
    postgresql_where=text("is_active"),
)


class Prescription(Base):
    """Prescription header; items hold the dispensed medicines."""

    __tablename__ = "prescriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    appointment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("appointments.id"), nullable=False, index=True
    )
    doctor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("doctors.id"), nullable=False, index=True
    )
    patient_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("patients.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    items: Mapped[List["PrescriptionItem"]] = relationship(
        "PrescriptionItem",
        back_populates="prescription",
        cascade="all, delete-orphan",
        order_by="PrescriptionItem.id",
    )

    def __repr__(self):
        return f"<Prescription(id={self.id}, appointment_id={self.appointment_id})>"


class PrescriptionItem(Base):
    __tablename__ = "prescription_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    prescription_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("prescriptions.id"), nullable=False, index=True
    )
    medicine_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("medicines.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    dosage: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    instructions: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)

    prescription: Mapped["Prescription"] = relationship(
        "Prescription", back_populates="items"
    )
    medicine: Mapped["Medicine"] = relationship("Medicine", foreign_keys=[medicine_id])

    def __repr__(self):
        return (
            f"<PrescriptionItem(id={self.id}, medicine_id={self.medicine_id}, "
            f"quantity={self.quantity})>"
        )


class Invoice(Base):
    """Invoice billed to a patient for an appointment"""

    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    appointment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("appointments.id"), nullable=False, index=True
    )
    patient_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("patients.id"), nullable=False, index=True
    )
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, default=Decimal("0.00")
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="Unpaid", index=True
    )  # Unpaid, Paid
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    document: Mapped[Optional[bytes]] = mapped_column(LargeBinary, nullable=True)

    items: Mapped[List["InvoiceItem"]] = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
    )

    def __repr__(self):
        return (
            f"<Invoice(id={self.id}, patient_id={self.patient_id}, "
            f"total_amount={self.total_amount}, status={self.status})>"
        )


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    invoice_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("invoices.id"), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    invoice: Mapped["Invoice"] = relationship("Invoice", back_populates="items")

    def __repr__(self):
        return f"<InvoiceItem(id={self.id}, description='{self.description}')>"
