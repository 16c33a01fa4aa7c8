from flask import Blueprint, jsonify

from clinic.core.api_utils import get_json_payload
from clinic.core.limiter_config import limiter
from clinic.db.session import SessionLocal
from clinic.db.unit_of_work import UnitOfWork
from clinic.repositories import DoctorRepository, PatientRepository
from clinic.schemas.dtos import (
    DoctorCreateRequest,
    DoctorResponse,
    PatientCreateRequest,
    PatientResponse,
)
from clinic.services.doctor_service import DoctorService
from clinic.services.patient_service import PatientService

patient_bp = Blueprint("patients", __name__, url_prefix="/api/patients")
doctor_bp = Blueprint("doctors", __name__, url_prefix="/api/doctors")


# ------------------- Patients -------------------


@patient_bp.route("", methods=["GET"])
def list_patients():
    db = SessionLocal()
    try:
        patients = PatientService(PatientRepository(db), UnitOfWork(db)).list_all()
        return jsonify([PatientResponse.from_domain(p).to_dict() for p in patients]), 200
    finally:
        db.close()


@patient_bp.route("", methods=["POST"])
@limiter.limit("30 per minute")
def create_patient():
    payload = PatientCreateRequest.from_dict(get_json_payload())
    payload.validate()
    db = SessionLocal()
    try:
        patient = PatientService(PatientRepository(db), UnitOfWork(db)).create(
            full_name=payload.full_name,
            email=payload.email,
            phone_number=payload.phone_number,
            date_of_birth=payload.date_of_birth,
        )
        return jsonify(PatientResponse.from_domain(patient).to_dict()), 201
    finally:
        db.close()


@patient_bp.route("/<int:patient_id>", methods=["GET"])
def get_patient(patient_id: int):
    db = SessionLocal()
    try:
        patient = PatientService(PatientRepository(db), UnitOfWork(db)).get(patient_id)
        return jsonify(PatientResponse.from_domain(patient).to_dict()), 200
    finally:
        db.close()


# ------------------- Doctors -------------------


@doctor_bp.route("", methods=["GET"])
def list_doctors():
    db = SessionLocal()
    try:
        doctors = DoctorService(DoctorRepository(db), UnitOfWork(db)).list_all()
        return jsonify([DoctorResponse.from_domain(d).to_dict() for d in doctors]), 200
    finally:
        db.close()


@doctor_bp.route("", methods=["POST"])
@limiter.limit("30 per minute")
def create_doctor():
    payload = DoctorCreateRequest.from_dict(get_json_payload())
    payload.validate()
    db = SessionLocal()
    try:
        doctor = DoctorService(DoctorRepository(db), UnitOfWork(db)).create(
            full_name=payload.full_name,
            specialization=payload.specialization,
            email=payload.email,
            phone_number=payload.phone_number,
        )
        return jsonify(DoctorResponse.from_domain(doctor).to_dict()), 201
    finally:
        db.close()


@doctor_bp.route("/<int:doctor_id>", methods=["GET"])
def get_doctor(doctor_id: int):
    db = SessionLocal()
    try:
        doctor = DoctorService(DoctorRepository(db), UnitOfWork(db)).get(doctor_id)
        return jsonify(DoctorResponse.from_domain(doctor).to_dict()), 200
    finally:
        db.close()
