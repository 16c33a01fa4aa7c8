"""
Data Transfer Objects (DTOs) and validation schemas.

Following SOLID principles:
- Single Responsibility: Each schema validates one specific data contract
- Open/Closed: Schemas can be extended without modification

Request DTOs are built from camelCase JSON with ``from_dict`` and checked with
``validate()``; both raise ``ValidationError`` (HTTP 400) before any service
runs. Response DTOs are built with ``from_domain`` and serialized with
``to_dict``.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from clinic.core.api_utils import isoformat, money
from clinic.core.config import to_utc_naive
from clinic.core.exceptions import ValidationError
from clinic.domain.entities import AppointmentStatus

TWO_PLACES = Decimal("0.01")
# Column limits: Integer is signed 32-bit, Numeric(18, 2) keeps 16 integer digits
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
DECIMAL_LIMIT = Decimal(10) ** 16


# ------------------- Field parsing helpers -------------------


def _require(data: Dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{key} is required")
    return value


def _parse_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().lstrip("-").isdigit():
        parsed = int(value.strip())
    else:
        raise ValidationError(f"{key} must be an integer")
    if not INT_MIN <= parsed <= INT_MAX:
        raise ValidationError(f"{key} is out of range")
    return parsed


def _parse_decimal(value: Any, key: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{key} must be a number")
    if not parsed.is_finite():
        raise ValidationError(f"{key} must be a number")
    if abs(parsed) >= DECIMAL_LIMIT:
        raise ValidationError(f"{key} is out of range")
    try:
        return parsed.quantize(TWO_PLACES)
    except InvalidOperation:
        raise ValidationError(f"{key} is out of range")


def _parse_datetime(value: Any, key: str) -> datetime:
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be an ISO-8601 datetime")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"{key} must be an ISO-8601 datetime")
    return to_utc_naive(parsed)


def _parse_date(value: Any, key: str) -> date:
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be an ISO-8601 date")
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        raise ValidationError(f"{key} must be an ISO-8601 date")


def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    value = value.strip()
    return value or None


def _check_length(value: Optional[str], key: str, max_length: int) -> None:
    if value is not None and len(value) > max_length:
        raise ValidationError(f"{key} must be at most {max_length} characters")


# ------------------- Patients & doctors -------------------


@dataclass
class PatientCreateRequest:
    """DTO for patient registration."""

    full_name: str
    email: str
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatientCreateRequest":
        dob = data.get("dateOfBirth")
        return cls(
            full_name=str(_require(data, "fullName")).strip(),
            email=str(_require(data, "email")).strip(),
            phone_number=_optional_str(data, "phoneNumber"),
            date_of_birth=_parse_date(dob, "dateOfBirth") if dob else None,
        )

    def validate(self) -> None:
        _check_length(self.full_name, "fullName", 150)
        _check_length(self.email, "email", 200)
        _check_length(self.phone_number, "phoneNumber", 30)
        if "@" not in self.email:
            raise ValidationError("Valid email is required")


@dataclass
class DoctorCreateRequest:
    """DTO for doctor registration."""

    full_name: str
    specialization: str
    email: Optional[str] = None
    phone_number: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DoctorCreateRequest":
        return cls(
            full_name=str(_require(data, "fullName")).strip(),
            specialization=str(_require(data, "specialization")).strip(),
            email=_optional_str(data, "email"),
            phone_number=_optional_str(data, "phoneNumber"),
        )

    def validate(self) -> None:
        _check_length(self.full_name, "fullName", 150)
        _check_length(self.specialization, "specialization", 120)
        _check_length(self.email, "email", 200)
        _check_length(self.phone_number, "phoneNumber", 30)
        if self.email is not None and "@" not in self.email:
            raise ValidationError("Valid email is required")


@dataclass
class PatientResponse:
    id: int
    full_name: str
    email: str
    phone_number: Optional[str]
    date_of_birth: Optional[date]
    created_at: Optional[datetime]

    @classmethod
    def from_domain(cls, patient) -> "PatientResponse":
        return cls(
            id=patient.id,
            full_name=patient.full_name,
            email=patient.email,
            phone_number=patient.phone_number,
            date_of_birth=patient.date_of_birth,
            created_at=patient.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "dateOfBirth": isoformat(self.date_of_birth),
            "createdAt": isoformat(self.created_at),
        }


@dataclass
class DoctorResponse:
    id: int
    full_name: str
    specialization: str
    email: Optional[str]
    phone_number: Optional[str]
    created_at: Optional[datetime]

    @classmethod
    def from_domain(cls, doctor) -> "DoctorResponse":
        return cls(
            id=doctor.id,
            full_name=doctor.full_name,
            specialization=doctor.specialization,
            email=doctor.email,
            phone_number=doctor.phone_number,
            created_at=doctor.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fullName": self.full_name,
            "specialization": self.specialization,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "createdAt": isoformat(self.created_at),
        }


# ------------------- Appointments -------------------


@dataclass
class AppointmentCreateRequest:
    """DTO for appointment creation requests."""

    doctor_id: int
    patient_id: int
    scheduled_at: datetime
    reason: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppointmentCreateRequest":
        return cls(
            doctor_id=_parse_int(_require(data, "doctorId"), "doctorId"),
            patient_id=_parse_int(_require(data, "patientId"), "patientId"),
            scheduled_at=_parse_datetime(_require(data, "scheduledAt"), "scheduledAt"),
            reason=_optional_str(data, "reason"),
        )

    def validate(self) -> None:
        """Validate the request data."""
        if self.doctor_id <= 0:
            raise ValidationError("Valid doctorId is required")
        if self.patient_id <= 0:
            raise ValidationError("Valid patientId is required")
        _check_length(self.reason, "reason", 500)


@dataclass
class AppointmentStatusUpdateRequest:
    """DTO for appointment status transitions."""

    status: AppointmentStatus

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppointmentStatusUpdateRequest":
        raw = _require(data, "status")
        try:
            return cls(status=AppointmentStatus.parse(raw))
        except ValueError:
            raise ValidationError("Invalid status")

    def validate(self) -> None:
        pass


@dataclass
class AppointmentResponse:
    """DTO for appointment API responses."""

    id: int
    doctor_id: int
    patient_id: int
    scheduled_at: Optional[datetime]
    reason: Optional[str]
    status: str
    created_at: Optional[datetime]
    completed_at: Optional[datetime]

    @classmethod
    def from_domain(cls, appointment) -> "AppointmentResponse":
        """Create response from domain entity."""
        return cls(
            id=appointment.id,
            doctor_id=appointment.doctor_id,
            patient_id=appointment.patient_id,
            scheduled_at=appointment.scheduled_at,
            reason=appointment.reason,
            status=appointment.status.value,
            created_at=appointment.created_at,
            completed_at=appointment.completed_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "doctorId": self.doctor_id,
            "patientId": self.patient_id,
            "scheduledAt": isoformat(self.scheduled_at),
            "reason": self.reason,
            "status": self.status,
            "createdAt": isoformat(self.created_at),
            "completedAt": isoformat(self.completed_at),
        }


# ------------------- Consultations -------------------


@dataclass
class ConsultationCreateRequest:
    appointment_id: int
    diagnosis: Optional[str] = None
    observations: Optional[str] = None
    notes: Optional[str] = None
    test_recommendations: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConsultationCreateRequest":
        return cls(
            appointment_id=_parse_int(
                _require(data, "appointmentId"), "appointmentId"
            ),
            diagnosis=_optional_str(data, "diagnosis"),
            observations=_optional_str(data, "observations"),
            notes=_optional_str(data, "notes"),
            test_recommendations=_optional_str(data, "testRecommendations"),
        )

    def validate(self) -> None:
        if self.appointment_id <= 0:
            raise ValidationError("Valid appointmentId is required")
        _check_length(self.diagnosis, "diagnosis", 500)
        _check_length(self.observations, "observations", 1000)
        _check_length(self.notes, "notes", 1000)
        _check_length(self.test_recommendations, "testRecommendations", 500)


@dataclass
class ConsultationResponse:
    id: int
    appointment_id: int
    diagnosis: Optional[str]
    observations: Optional[str]
    notes: Optional[str]
    test_recommendations: Optional[str]
    created_at: Optional[datetime]

    @classmethod
    def from_domain(cls, consultation) -> "ConsultationResponse":
        return cls(
            id=consultation.id,
            appointment_id=consultation.appointment_id,
            diagnosis=consultation.diagnosis,
            observations=consultation.observations,
            notes=consultation.notes,
            test_recommendations=consultation.test_recommendations,
            created_at=consultation.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "appointmentId": self.appointment_id,
            "diagnosis": self.diagnosis,
            "observations": self.observations,
            "notes": self.notes,
            "testRecommendations": self.test_recommendations,
            "createdAt": isoformat(self.created_at),
        }


# ------------------- Prescriptions -------------------


@dataclass
class PrescriptionItemRequest:
    medicine_id: int
    quantity: int
    dosage: Optional[str] = None
    instructions: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrescriptionItemRequest":
        if not isinstance(data, dict):
            raise ValidationError("Each item must be an object")
        return cls(
            medicine_id=_parse_int(_require(data, "medicineId"), "medicineId"),
            quantity=_parse_int(_require(data, "quantity"), "quantity"),
            dosage=_optional_str(data, "dosage"),
            instructions=_optional_str(data, "instructions"),
        )

    def validate(self) -> None:
        if self.medicine_id <= 0:
            raise ValidationError("Valid medicineId is required")
        if self.quantity <= 0:
            raise ValidationError("Quantity must be greater than zero.")
        _check_length(self.dosage, "dosage", 200)
        _check_length(self.instructions, "instructions", 300)


@dataclass
class PrescriptionCreateRequest:
    """DTO for multi-item prescription requests."""

    appointment_id: int
    doctor_id: int
    patient_id: int
    items: List[PrescriptionItemRequest] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrescriptionCreateRequest":
        raw_items = data.get("items")
        if raw_items is None:
            raw_items = []
        if not isinstance(raw_items, list):
            raise ValidationError("items must be a list")
        return cls(
            appointment_id=_parse_int(
                _require(data, "appointmentId"), "appointmentId"
            ),
            doctor_id=_parse_int(_require(data, "doctorId"), "doctorId"),
            patient_id=_parse_int(_require(data, "patientId"), "patientId"),
            items=[PrescriptionItemRequest.from_dict(i) for i in raw_items],
        )

    def validate(self) -> None:
        if self.appointment_id <= 0:
            raise ValidationError("Valid appointmentId is required")
        if self.doctor_id <= 0:
            raise ValidationError("Valid doctorId is required")
        if self.patient_id <= 0:
            raise ValidationError("Valid patientId is required")
        if not self.items:
            raise ValidationError("At least one prescription item is required")
        for item in self.items:
            item.validate()


@dataclass
class PrescriptionResponse:
    id: int
    appointment_id: int
    doctor_id: int
    patient_id: int
    created_at: Optional[datetime]
    items: List[Dict[str, Any]]

    @classmethod
    def from_domain(cls, prescription) -> "PrescriptionResponse":
        return cls(
            id=prescription.id,
            appointment_id=prescription.appointment_id,
            doctor_id=prescription.doctor_id,
            patient_id=prescription.patient_id,
            created_at=prescription.created_at,
            items=[
                {
                    "id": item.id,
                    "medicineId": item.medicine_id,
                    "medicineName": item.medicine_name,
                    "quantity": item.quantity,
                    "dosage": item.dosage,
                    "instructions": item.instructions,
                }
                for item in prescription.items
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "appointmentId": self.appointment_id,
            "doctorId": self.doctor_id,
            "patientId": self.patient_id,
            "createdAt": isoformat(self.created_at),
            "items": self.items,
        }


# ------------------- Medicines -------------------


@dataclass
class MedicineRequest:
    """DTO for medicine create and full-overwrite update requests."""

    name: str
    quantity: int
    minimum_threshold: int
    price_per_unit: Decimal
    description: Optional[str] = None
    unit: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MedicineRequest":
        is_active = data.get("isActive", True)
        if not isinstance(is_active, bool):
            raise ValidationError("isActive must be a boolean")
        return cls(
            name=str(_require(data, "name")).strip(),
            quantity=_parse_int(_require(data, "quantity"), "quantity"),
            minimum_threshold=_parse_int(
                _require(data, "minimumThreshold"), "minimumThreshold"
            ),
            price_per_unit=_parse_decimal(
                _require(data, "pricePerUnit"), "pricePerUnit"
            ),
            description=_optional_str(data, "description"),
            unit=_optional_str(data, "unit"),
            is_active=is_active,
        )

    def validate(self) -> None:
        _check_length(self.name, "name", 180)
        _check_length(self.description, "description", 500)
        _check_length(self.unit, "unit", 40)
        if self.quantity < 0:
            raise ValidationError("quantity cannot be negative")
        if self.minimum_threshold < 0:
            raise ValidationError("minimumThreshold cannot be negative")
        if self.price_per_unit < 0:
            raise ValidationError("pricePerUnit cannot be negative")


@dataclass
class MedicineResponse:
    id: int
    name: str
    description: Optional[str]
    unit: Optional[str]
    quantity: int
    minimum_threshold: int
    price_per_unit: Decimal
    is_active: bool
    is_low_stock: bool
    created_at: Optional[datetime]

    @classmethod
    def from_domain(cls, medicine) -> "MedicineResponse":
        return cls(
            id=medicine.id,
            name=medicine.name,
            description=medicine.description,
            unit=medicine.unit,
            quantity=medicine.quantity,
            minimum_threshold=medicine.minimum_threshold,
            price_per_unit=medicine.price_per_unit,
            is_active=medicine.is_active,
            is_low_stock=medicine.is_low_stock(),
            created_at=medicine.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "unit": self.unit,
            "quantity": self.quantity,
            "minimumThreshold": self.minimum_threshold,
            "pricePerUnit": money(self.price_per_unit),
            "isActive": self.is_active,
            "isLowStock": self.is_low_stock,
            "createdAt": isoformat(self.created_at),
        }


# ------------------- Invoices -------------------


@dataclass
class InvoiceItemRequest:
    description: str
    quantity: int
    unit_price: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvoiceItemRequest":
        if not isinstance(data, dict):
            raise ValidationError("Each item must be an object")
        return cls(
            description=str(_require(data, "description")).strip(),
            quantity=_parse_int(data.get("quantity", 1), "quantity"),
            unit_price=_parse_decimal(_require(data, "unitPrice"), "unitPrice"),
        )

    def validate(self) -> None:
        _check_length(self.description, "description", 200)
        if self.quantity < 1:
            raise ValidationError("quantity must be at least 1")
        if self.unit_price < 0:
            raise ValidationError("unitPrice cannot be negative")


@dataclass
class InvoiceCreateRequest:
    appointment_id: int
    patient_id: int
    items: List[InvoiceItemRequest] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvoiceCreateRequest":
        raw_items = data.get("items")
        if raw_items is None:
            raw_items = []
        if not isinstance(raw_items, list):
            raise ValidationError("items must be a list")
        return cls(
            appointment_id=_parse_int(
                _require(data, "appointmentId"), "appointmentId"
            ),
            patient_id=_parse_int(_require(data, "patientId"), "patientId"),
            items=[InvoiceItemRequest.from_dict(i) for i in raw_items],
        )

    def validate(self) -> None:
        if self.appointment_id <= 0:
            raise ValidationError("Valid appointmentId is required")
        if self.patient_id <= 0:
            raise ValidationError("Valid patientId is required")
        for item in self.items:
            item.validate()


@dataclass
class InvoiceResponse:
    id: int
    appointment_id: int
    patient_id: int
    total_amount: Decimal
    status: str
    created_at: Optional[datetime]
    paid_at: Optional[datetime]
    has_document: bool
    items: List[Dict[str, Any]]

    @classmethod
    def from_domain(cls, invoice) -> "InvoiceResponse":
        return cls(
            id=invoice.id,
            appointment_id=invoice.appointment_id,
            patient_id=invoice.patient_id,
            total_amount=invoice.total_amount,
            status=invoice.status.value,
            created_at=invoice.created_at,
            paid_at=invoice.paid_at,
            has_document=invoice.has_document,
            items=[
                {
                    "id": item.id,
                    "description": item.description,
                    "quantity": item.quantity,
                    "unitPrice": money(item.unit_price),
                    "lineTotal": money(item.line_total),
                }
                for item in invoice.items
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "appointmentId": self.appointment_id,
            "patientId": self.patient_id,
            "totalAmount": money(self.total_amount),
            "status": self.status,
            "createdAt": isoformat(self.created_at),
            "paidAt": isoformat(self.paid_at),
            "hasDocument": self.has_document,
            "items": self.items,
        }
