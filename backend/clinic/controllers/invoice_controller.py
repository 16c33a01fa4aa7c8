"""
Invoice controller: billing and printable invoice documents.
"""

from flask import Blueprint, Response, jsonify

from clinic.core.api_utils import get_json_payload
from clinic.core.limiter_config import limiter
from clinic.db.session import SessionLocal
from clinic.db.unit_of_work import UnitOfWork
from clinic.domain.entities import InvoiceItem
from clinic.repositories import (
    AppointmentRepository,
    InvoiceRepository,
    PatientRepository,
)
from clinic.schemas.dtos import InvoiceCreateRequest, InvoiceResponse
from clinic.services.invoice_document import PdfInvoiceRenderer
from clinic.services.invoice_service import InvoiceService

invoice_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


def _service(db) -> InvoiceService:
    return InvoiceService(
        invoice_repo=InvoiceRepository(db),
        appointment_repo=AppointmentRepository(db),
        patient_repo=PatientRepository(db),
        renderer=PdfInvoiceRenderer(),
        uow=UnitOfWork(db),
    )


@invoice_bp.route("", methods=["POST"])
@limiter.limit("30 per minute")
def create_invoice():
    payload = InvoiceCreateRequest.from_dict(get_json_payload())
    payload.validate()
    db = SessionLocal()
    try:
        invoice = _service(db).create(
            appointment_id=payload.appointment_id,
            patient_id=payload.patient_id,
            items=[
                InvoiceItem(
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in payload.items
            ],
        )
        return jsonify(InvoiceResponse.from_domain(invoice).to_dict()), 201
    finally:
        db.close()


@invoice_bp.route("/<int:invoice_id>", methods=["GET"])
def get_invoice(invoice_id: int):
    db = SessionLocal()
    try:
        invoice = _service(db).get(invoice_id)
        return jsonify(InvoiceResponse.from_domain(invoice).to_dict()), 200
    finally:
        db.close()


@invoice_bp.route("/<int:invoice_id>/pay", methods=["POST"])
@limiter.limit("30 per minute")
def mark_invoice_paid(invoice_id: int):
    db = SessionLocal()
    try:
        invoice = _service(db).mark_paid(invoice_id)
        return jsonify(InvoiceResponse.from_domain(invoice).to_dict()), 200
    finally:
        db.close()


@invoice_bp.route("/<int:invoice_id>/document", methods=["GET"])
def get_invoice_document(invoice_id: int):
    """Return the invoice PDF, rendering and storing it on first request."""
    db = SessionLocal()
    try:
        document = _service(db).get_document(invoice_id)
        return Response(
            document,
            mimetype="application/pdf",
            headers={
                "Content-Disposition": f"inline; filename=invoice_{invoice_id}.pdf"
            },
        )
    finally:
        db.close()
