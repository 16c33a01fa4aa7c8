from flask import Blueprint, jsonify

from clinic.core.api_utils import get_json_payload
from clinic.core.limiter_config import limiter
from clinic.db.session import SessionLocal
from clinic.db.unit_of_work import UnitOfWork
from clinic.domain.entities import PrescriptionItem
from clinic.repositories import (
    AppointmentRepository,
    DoctorRepository,
    MedicineRepository,
    PatientRepository,
    PrescriptionRepository,
)
from clinic.schemas.dtos import PrescriptionCreateRequest, PrescriptionResponse
from clinic.services.inventory_service import InventoryService
from clinic.services.low_stock_alert_service import LoggingLowStockNotifier
from clinic.services.prescription_service import PrescriptionService

prescription_bp = Blueprint(
    "prescriptions", __name__, url_prefix="/api/prescriptions"
)


def _service(db) -> PrescriptionService:
    # One unit of work shared by both services keeps the deductions and the
    # prescription rows in a single transaction
    uow = UnitOfWork(db)
    inventory = InventoryService(
        medicine_repo=MedicineRepository(db),
        uow=uow,
        notifier=LoggingLowStockNotifier(),
    )
    return PrescriptionService(
        prescription_repo=PrescriptionRepository(db),
        appointment_repo=AppointmentRepository(db),
        doctor_repo=DoctorRepository(db),
        patient_repo=PatientRepository(db),
        inventory_service=inventory,
        uow=uow,
    )


@prescription_bp.route("", methods=["POST"])
@limiter.limit("30 per minute")
def create_prescription():
    """Create a prescription and dispense its medicines."""
    payload = PrescriptionCreateRequest.from_dict(get_json_payload())
    payload.validate()
    db = SessionLocal()
    try:
        prescription = _service(db).create(
            appointment_id=payload.appointment_id,
            doctor_id=payload.doctor_id,
            patient_id=payload.patient_id,
            items=[
                PrescriptionItem(
                    medicine_id=item.medicine_id,
                    quantity=item.quantity,
                    dosage=item.dosage,
                    instructions=item.instructions,
                )
                for item in payload.items
            ],
        )
        return jsonify(PrescriptionResponse.from_domain(prescription).to_dict()), 200
    finally:
        db.close()


@prescription_bp.route("/<int:prescription_id>", methods=["GET"])
def get_prescription(prescription_id: int):
    db = SessionLocal()
    try:
        prescription = _service(db).get(prescription_id)
        return jsonify(PrescriptionResponse.from_domain(prescription).to_dict()), 200
    finally:
        db.close()


@prescription_bp.route("/patient/<int:patient_id>", methods=["GET"])
def list_patient_prescriptions(patient_id: int):
    db = SessionLocal()
    try:
        prescriptions = _service(db).list_for_patient(patient_id)
        return (
            jsonify([PrescriptionResponse.from_domain(p).to_dict() for p in prescriptions]),
            200,
        )
    finally:
        db.close()
