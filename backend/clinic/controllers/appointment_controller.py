"""
Appointment controller for handling HTTP requests following SOLID principles.

This controller:
- Handles HTTP concerns only (Single Responsibility)
- Depends on service abstractions (Dependency Inversion)
"""

from flask import Blueprint, jsonify

from clinic.core.api_utils import get_json_payload
from clinic.core.limiter_config import limiter
from clinic.db.session import SessionLocal
from clinic.db.unit_of_work import UnitOfWork
from clinic.repositories import (
    AppointmentRepository,
    DoctorRepository,
    PatientRepository,
)
from clinic.schemas.dtos import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AppointmentStatusUpdateRequest,
)
from clinic.services.appointment_service import AppointmentService

appointment_bp = Blueprint("appointments", __name__, url_prefix="/api/appointments")


def _service(db) -> AppointmentService:
    return AppointmentService(
        appointment_repo=AppointmentRepository(db),
        doctor_repo=DoctorRepository(db),
        patient_repo=PatientRepository(db),
        uow=UnitOfWork(db),
    )


@appointment_bp.route("", methods=["POST"])
@limiter.limit("30 per minute")
def create_appointment():
    """Book a new appointment (status Pending)."""
    payload = AppointmentCreateRequest.from_dict(get_json_payload())
    payload.validate()
    db = SessionLocal()
    try:
        appointment = _service(db).create(
            doctor_id=payload.doctor_id,
            patient_id=payload.patient_id,
            scheduled_at=payload.scheduled_at,
            reason=payload.reason,
        )
        return jsonify(AppointmentResponse.from_domain(appointment).to_dict()), 201
    finally:
        db.close()


@appointment_bp.route("/<int:appointment_id>", methods=["GET"])
def get_appointment(appointment_id: int):
    db = SessionLocal()
    try:
        appointment = _service(db).get(appointment_id)
        return jsonify(AppointmentResponse.from_domain(appointment).to_dict()), 200
    finally:
        db.close()


@appointment_bp.route("/<int:appointment_id>/status", methods=["PATCH"])
@limiter.limit("30 per minute")
def update_appointment_status(appointment_id: int):
    """Approve, reject or complete an appointment."""
    payload = AppointmentStatusUpdateRequest.from_dict(get_json_payload())
    db = SessionLocal()
    try:
        appointment = _service(db).update_status(appointment_id, payload.status)
        return jsonify(AppointmentResponse.from_domain(appointment).to_dict()), 200
    finally:
        db.close()


@appointment_bp.route("/doctor/<int:doctor_id>", methods=["GET"])
def list_doctor_appointments(doctor_id: int):
    db = SessionLocal()
    try:
        appointments = _service(db).list_for_doctor(doctor_id)
        return (
            jsonify([AppointmentResponse.from_domain(a).to_dict() for a in appointments]),
            200,
        )
    finally:
        db.close()


@appointment_bp.route("/patient/<int:patient_id>", methods=["GET"])
def list_patient_appointments(patient_id: int):
    db = SessionLocal()
    try:
        appointments = _service(db).list_for_patient(patient_id)
        return (
            jsonify([AppointmentResponse.from_domain(a).to_dict() for a in appointments]),
            200,
        )
    finally:
        db.close()
