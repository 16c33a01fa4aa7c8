"""
Dashboard statistics: headline counts across the clinic.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict

from clinic.core import config
from clinic.core.api_utils import money
from clinic.core.config import to_utc_naive, utcnow
from clinic.domain.entities import AppointmentStatus, InvoiceStatus
from clinic.domain.interfaces import (
    IAppointmentRepository,
    IDoctorRepository,
    IInvoiceRepository,
    IMedicineRepository,
    IPatientRepository,
)


@dataclass
class DashboardStats:
    total_appointments: int
    today_appointments: int
    pending_appointments: int
    total_patients: int
    total_doctors: int
    total_medicines: int
    low_stock_items: int
    total_invoices: int
    unpaid_invoices: int
    paid_amount: Decimal
    unpaid_amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "appointments": {
                "total": self.total_appointments,
                "today": self.today_appointments,
                "pending": self.pending_appointments,
            },
            "patients": {"total": self.total_patients},
            "doctors": {"total": self.total_doctors},
            "inventory": {
                "totalMedicines": self.total_medicines,
                "lowStockItems": self.low_stock_items,
            },
            "invoices": {
                "total": self.total_invoices,
                "unpaid": self.unpaid_invoices,
                "paidAmount": money(self.paid_amount),
                "unpaidAmount": money(self.unpaid_amount),
            },
        }


class DashboardService:
    def __init__(
        self,
        appointment_repo: IAppointmentRepository,
        patient_repo: IPatientRepository,
        doctor_repo: IDoctorRepository,
        medicine_repo: IMedicineRepository,
        invoice_repo: IInvoiceRepository,
        clock=utcnow,
    ):
        self.appointment_repo = appointment_repo
        self.patient_repo = patient_repo
        self.doctor_repo = doctor_repo
        self.medicine_repo = medicine_repo
        self.invoice_repo = invoice_repo
        self.clock = clock

    def get_stats(self) -> DashboardStats:
        day_start, day_end = self._today_window()
        return DashboardStats(
            total_appointments=self.appointment_repo.count(),
            today_appointments=self.appointment_repo.count(
                start=day_start, end=day_end
            ),
            pending_appointments=self.appointment_repo.count(
                status=AppointmentStatus.PENDING
            ),
            total_patients=self.patient_repo.count(),
            total_doctors=self.doctor_repo.count(),
            total_medicines=self.medicine_repo.count(),
            low_stock_items=self.medicine_repo.count(low_stock_only=True),
            total_invoices=self.invoice_repo.count(),
            unpaid_invoices=self.invoice_repo.count(status=InvoiceStatus.UNPAID),
            paid_amount=self.invoice_repo.sum_total(InvoiceStatus.PAID),
            unpaid_amount=self.invoice_repo.sum_total(InvoiceStatus.UNPAID),
        )

    def _today_window(self):
        """[start, end) of the current local day (TZ), as naive UTC."""
        local_now = self.clock().replace(tzinfo=timezone.utc).astimezone(config.APP_TZ)
        local_start = datetime.combine(local_now.date(), time.min, tzinfo=config.APP_TZ)
        start = to_utc_naive(local_start)
        end = to_utc_naive(local_start + timedelta(days=1))
        return start, end
