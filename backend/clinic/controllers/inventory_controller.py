"""
Medicine inventory controller.
"""

from flask import Blueprint, jsonify

from clinic.core.api_utils import get_json_payload
from clinic.core.limiter_config import limiter
from clinic.db.session import SessionLocal
from clinic.db.unit_of_work import UnitOfWork
from clinic.repositories import MedicineRepository
from clinic.schemas.dtos import MedicineRequest, MedicineResponse
from clinic.services.inventory_service import InventoryService
from clinic.services.low_stock_alert_service import LoggingLowStockNotifier

inventory_bp = Blueprint("medicines", __name__, url_prefix="/api/medicines")


def build_inventory_service(db) -> InventoryService:
    return InventoryService(
        medicine_repo=MedicineRepository(db),
        uow=UnitOfWork(db),
        notifier=LoggingLowStockNotifier(),
    )


@inventory_bp.route("", methods=["GET"])
@limiter.limit("100 per minute")
def list_medicines():
    """List all medicines ordered by name."""
    db = SessionLocal()
    try:
        medicines = build_inventory_service(db).list_all()
        return jsonify([MedicineResponse.from_domain(m).to_dict() for m in medicines]), 200
    finally:
        db.close()


@inventory_bp.route("/low-stock", methods=["GET"])
def list_low_stock():
    db = SessionLocal()
    try:
        medicines = build_inventory_service(db).get_low_stock()
        return jsonify([MedicineResponse.from_domain(m).to_dict() for m in medicines]), 200
    finally:
        db.close()


@inventory_bp.route("/<int:medicine_id>", methods=["GET"])
def get_medicine(medicine_id: int):
    db = SessionLocal()
    try:
        medicine = build_inventory_service(db).get(medicine_id)
        return jsonify(MedicineResponse.from_domain(medicine).to_dict()), 200
    finally:
        db.close()


@inventory_bp.route("", methods=["POST"])
@limiter.limit("30 per minute")
def create_medicine():
    payload = MedicineRequest.from_dict(get_json_payload())
    payload.validate()
    db = SessionLocal()
    try:
        medicine = build_inventory_service(db).create(
            name=payload.name,
            quantity=payload.quantity,
            minimum_threshold=payload.minimum_threshold,
            price_per_unit=payload.price_per_unit,
            description=payload.description,
            unit=payload.unit,
        )
        return jsonify(MedicineResponse.from_domain(medicine).to_dict()), 201
    finally:
        db.close()


@inventory_bp.route("/<int:medicine_id>", methods=["PUT"])
@limiter.limit("30 per minute")
def update_medicine(medicine_id: int):
    """Full overwrite of a medicine's mutable fields."""
    payload = MedicineRequest.from_dict(get_json_payload())
    payload.validate()
    db = SessionLocal()
    try:
        medicine = build_inventory_service(db).update(
            medicine_id,
            name=payload.name,
            quantity=payload.quantity,
            minimum_threshold=payload.minimum_threshold,
            price_per_unit=payload.price_per_unit,
            description=payload.description,
            unit=payload.unit,
            is_active=payload.is_active,
        )
        return jsonify(MedicineResponse.from_domain(medicine).to_dict()), 200
    finally:
        db.close()


@inventory_bp.route("/<int:medicine_id>", methods=["DELETE"])
@limiter.limit("30 per minute")
def delete_medicine(medicine_id: int):
    db = SessionLocal()
    try:
        build_inventory_service(db).delete(medicine_id)
        return "", 204
    finally:
        db.close()
