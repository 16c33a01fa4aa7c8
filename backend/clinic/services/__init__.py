"""
Application services - domain rules for the clinic.

Services receive their repositories, the unit of work and collaborators via
the constructor; blueprints build them per request.
"""

from .appointment_service import AppointmentService
from .consultation_service import ConsultationService
from .dashboard_service import DashboardService
from .doctor_service import DoctorService
from .inventory_service import InventoryService
from .invoice_document import DocumentRenderError, PdfInvoiceRenderer
from .invoice_service import InvoiceService
from .low_stock_alert_service import LoggingLowStockNotifier
from .patient_service import PatientService
from .prescription_service import PrescriptionService

__all__ = [
    "AppointmentService",
    "ConsultationService",
    "DashboardService",
    "DoctorService",
    "DocumentRenderError",
    "InventoryService",
    "InvoiceService",
    "LoggingLowStockNotifier",
    "PatientService",
    "PdfInvoiceRenderer",
    "PrescriptionService",
]
