from flask import Blueprint, jsonify

from clinic.db.session import SessionLocal
from clinic.repositories import (
    AppointmentRepository,
    DoctorRepository,
    InvoiceRepository,
    MedicineRepository,
    PatientRepository,
)
from clinic.services.dashboard_service import DashboardService

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.route("/stats", methods=["GET"])
def dashboard_stats():
    """Headline counts for appointments, patients, doctors, stock and billing."""
    db = SessionLocal()
    try:
        service = DashboardService(
            appointment_repo=AppointmentRepository(db),
            patient_repo=PatientRepository(db),
            doctor_repo=DoctorRepository(db),
            medicine_repo=MedicineRepository(db),
            invoice_repo=InvoiceRepository(db),
        )
        return jsonify(service.get_stats().to_dict()), 200
    finally:
        db.close()
