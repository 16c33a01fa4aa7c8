"""
Invoice document rendering: Jinja2 HTML template converted to PDF by xhtml2pdf.
"""

import logging
import os
from datetime import timezone
from io import BytesIO
from typing import Optional

import jinja2
from xhtml2pdf import pisa

from clinic.core import config
from clinic.core.config import utcnow
from clinic.domain.entities import Invoice, Patient
from clinic.domain.interfaces import IInvoiceDocumentRenderer

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")


class DocumentRenderError(RuntimeError):
    """xhtml2pdf reported errors while building the PDF."""


class PdfInvoiceRenderer(IInvoiceDocumentRenderer):
    def __init__(
        self,
        template_path: str = TEMPLATE_DIR,
        clinic_name: Optional[str] = None,
        currency: Optional[str] = None,
    ):
        self.template_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(template_path),
            autoescape=jinja2.select_autoescape(["html"]),
        )
        self.clinic_name = clinic_name or config.get_clinic_name()
        self.currency = currency or config.get_currency_symbol()

    def render_html(self, invoice: Invoice, patient: Patient) -> str:
        template = self.template_env.get_template("invoice.html")
        return template.render(
            invoice=invoice,
            patient_name=patient.full_name,
            clinic_name=self.clinic_name,
            currency=self.currency,
            created_at=_fmt(invoice.created_at),
            paid_at=_fmt(invoice.paid_at),
            generated_at=_fmt(utcnow()),
            timezone_name=str(config.APP_TZ),
        )

    def render(self, invoice: Invoice, patient: Patient) -> bytes:
        html = self.render_html(invoice, patient)
        pdf_io = BytesIO()
        result = pisa.CreatePDF(src=html, dest=pdf_io)
        if result.err:
            logger.error(
                "Invoice PDF rendering failed",
                extra={"context": {"invoice_id": invoice.id, "errors": result.err}},
            )
            raise DocumentRenderError(f"Could not render invoice {invoice.id}")
        return pdf_io.getvalue()


def _fmt(value) -> str:
    """Stored naive UTC shown in the clinic timezone."""
    if not value:
        return ""
    local = value.replace(tzinfo=timezone.utc).astimezone(config.APP_TZ)
    return local.strftime("%Y-%m-%d %H:%M")
