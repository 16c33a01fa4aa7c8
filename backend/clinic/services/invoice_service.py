"""
Invoice service: billing for an appointment.
"""

import logging
from typing import List

from clinic.core.config import utcnow
from clinic.core.exceptions import InvalidStateError, NotFoundError
from clinic.domain.entities import Invoice, InvoiceItem, InvoiceStatus
from clinic.domain.interfaces import (
    IAppointmentRepository,
    IInvoiceDocumentRenderer,
    IInvoiceRepository,
    IPatientRepository,
)

logger = logging.getLogger(__name__)


class InvoiceService:
    def __init__(
        self,
        invoice_repo: IInvoiceRepository,
        appointment_repo: IAppointmentRepository,
        patient_repo: IPatientRepository,
        renderer: IInvoiceDocumentRenderer,
        uow,
        clock=utcnow,
    ):
        self.invoice_repo = invoice_repo
        self.appointment_repo = appointment_repo
        self.patient_repo = patient_repo
        self.renderer = renderer
        self.uow = uow
        self.clock = clock

    def create(
        self, appointment_id: int, patient_id: int, items: List[InvoiceItem]
    ) -> Invoice:
        """Create an unpaid invoice whose total is the exact sum of its lines.

        The rendered document is stored in the same transaction as the invoice.
        """
        with self.uow.atomic():
            appointment = self.appointment_repo.get_by_id(appointment_id)
            if not appointment:
                raise NotFoundError("Appointment not found.")
            patient = self.patient_repo.get_by_id(patient_id)
            if not patient:
                raise NotFoundError("Patient not found.")
            if appointment.patient_id != patient_id:
                raise InvalidStateError("Appointment and patient mismatch.")

            invoice = Invoice(
                appointment_id=appointment_id,
                patient_id=patient_id,
                items=list(items),
                status=InvoiceStatus.UNPAID,
                created_at=self.clock(),
            )
            invoice.total_amount = invoice.calculate_total()
            invoice = self.invoice_repo.create(invoice)

            # The document shows the invoice id, so render once it is assigned
            invoice.document = self.renderer.render(invoice, patient)
            invoice = self.invoice_repo.update(invoice)
        logger.info(
            "Invoice created",
            extra={
                "context": {
                    "invoice_id": invoice.id,
                    "appointment_id": appointment_id,
                    "total_amount": str(invoice.total_amount),
                }
            },
        )
        return invoice

    def get(self, invoice_id: int) -> Invoice:
        invoice = self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            raise NotFoundError("Invoice not found.")
        return invoice

    def mark_paid(self, invoice_id: int) -> Invoice:
        """Set status Paid and stamp paid_at; repeated calls re-stamp paid_at."""
        with self.uow.atomic():
            invoice = self.get(invoice_id)
            invoice.status = InvoiceStatus.PAID
            invoice.paid_at = self.clock()
            invoice = self.invoice_repo.update(invoice)
        logger.info("Invoice paid", extra={"context": {"invoice_id": invoice_id}})
        return invoice

    def get_document(self, invoice_id: int) -> bytes:
        """Return the stored document, rendering and storing it when missing."""
        invoice = self.get(invoice_id)
        if invoice.has_document:
            return invoice.document

        with self.uow.atomic():
            patient = self.patient_repo.get_by_id(invoice.patient_id)
            if not patient:
                raise NotFoundError("Patient not found.")
            invoice.document = self.renderer.render(invoice, patient)
            invoice = self.invoice_repo.update(invoice)
        return invoice.document
