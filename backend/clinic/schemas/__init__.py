"""
Schemas package - Data Transfer Objects and validation.

This package contains DTOs that define the API contracts
and handle validation following SOLID principles.
"""

from .dtos import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AppointmentStatusUpdateRequest,
    ConsultationCreateRequest,
    ConsultationResponse,
    DoctorCreateRequest,
    DoctorResponse,
    InvoiceCreateRequest,
    InvoiceItemRequest,
    InvoiceResponse,
    MedicineRequest,
    MedicineResponse,
    PatientCreateRequest,
    PatientResponse,
    PrescriptionCreateRequest,
    PrescriptionItemRequest,
    PrescriptionResponse,
)

__all__ = [
    "AppointmentCreateRequest",
    "AppointmentResponse",
    "AppointmentStatusUpdateRequest",
    "ConsultationCreateRequest",
    "ConsultationResponse",
    "DoctorCreateRequest",
    "DoctorResponse",
    "InvoiceCreateRequest",
    "InvoiceItemRequest",
    "InvoiceResponse",
    "MedicineRequest",
    "MedicineResponse",
    "PatientCreateRequest",
    "PatientResponse",
    "PrescriptionCreateRequest",
    "PrescriptionItemRequest",
    "PrescriptionResponse",
]
