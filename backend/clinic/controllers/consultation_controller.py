from flask import Blueprint, jsonify

from clinic.core.api_utils import get_json_payload
from clinic.core.limiter_config import limiter
from clinic.db.session import SessionLocal
from clinic.db.unit_of_work import UnitOfWork
from clinic.repositories import AppointmentRepository, ConsultationRepository
from clinic.schemas.dtos import ConsultationCreateRequest, ConsultationResponse
from clinic.services.consultation_service import ConsultationService

consultation_bp = Blueprint(
    "consultations", __name__, url_prefix="/api/consultations"
)


def _service(db) -> ConsultationService:
    return ConsultationService(
        consultation_repo=ConsultationRepository(db),
        appointment_repo=AppointmentRepository(db),
        uow=UnitOfWork(db),
    )


@consultation_bp.route("", methods=["POST"])
@limiter.limit("30 per minute")
def create_consultation():
    payload = ConsultationCreateRequest.from_dict(get_json_payload())
    payload.validate()
    db = SessionLocal()
    try:
        consultation = _service(db).create(
            appointment_id=payload.appointment_id,
            diagnosis=payload.diagnosis,
            observations=payload.observations,
            notes=payload.notes,
            test_recommendations=payload.test_recommendations,
        )
        return jsonify(ConsultationResponse.from_domain(consultation).to_dict()), 200
    finally:
        db.close()


@consultation_bp.route("/appointment/<int:appointment_id>", methods=["GET"])
def get_consultation_for_appointment(appointment_id: int):
    db = SessionLocal()
    try:
        consultation = _service(db).get_for_appointment(appointment_id)
        return jsonify(ConsultationResponse.from_domain(consultation).to_dict()), 200
    finally:
        db.close()
