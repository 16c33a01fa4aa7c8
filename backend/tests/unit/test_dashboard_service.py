"""
Unit tests for DashboardService statistics.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from clinic.domain.entities import AppointmentStatus, InvoiceStatus
from clinic.services.dashboard_service import DashboardService
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    DoctorRepositoryFactory,
    InvoiceRepositoryFactory,
    MedicineRepositoryFactory,
    PatientRepositoryFactory,
)
from tests.fixtures.domain_fixtures import FIXED_NOW


@pytest.fixture
def repos():
    return {
        "appointment": AppointmentRepositoryFactory.create_mock_full(),
        "patient": PatientRepositoryFactory.create_mock_full(),
        "doctor": DoctorRepositoryFactory.create_mock_full(),
        "medicine": MedicineRepositoryFactory.create_mock_full(),
        "invoice": InvoiceRepositoryFactory.create_mock_full(),
    }


@pytest.fixture
def service(repos, clock):
    return DashboardService(
        repos["appointment"],
        repos["patient"],
        repos["doctor"],
        repos["medicine"],
        repos["invoice"],
        clock=clock,
    )


def test_stats_aggregate_repository_counts(service, repos):
    repos["appointment"].count.side_effect = lambda status=None, start=None, end=None: (
        2 if status == AppointmentStatus.PENDING else (1 if start else 7)
    )
    repos["patient"].count.return_value = 4
    repos["doctor"].count.return_value = 2
    repos["medicine"].count.side_effect = lambda low_stock_only=False: (
        1 if low_stock_only else 9
    )
    repos["invoice"].count.side_effect = lambda status=None: (
        3 if status == InvoiceStatus.UNPAID else 5
    )
    repos["invoice"].sum_total.side_effect = lambda status: (
        Decimal("120.00") if status == InvoiceStatus.PAID else Decimal("45.50")
    )

    stats = service.get_stats().to_dict()

    assert stats == {
        "appointments": {"total": 7, "today": 1, "pending": 2},
        "patients": {"total": 4},
        "doctors": {"total": 2},
        "inventory": {"totalMedicines": 9, "lowStockItems": 1},
        "invoices": {
            "total": 5,
            "unpaid": 3,
            "paidAmount": "120.00",
            "unpaidAmount": "45.50",
        },
    }


def test_today_window_spans_one_utc_day(service, repos, monkeypatch):
    from zoneinfo import ZoneInfo

    from clinic.core import config

    monkeypatch.setattr(config, "APP_TZ", ZoneInfo("UTC"))

    service.get_stats()

    today_call = [
        c for c in repos["appointment"].count.call_args_list if c.kwargs.get("start")
    ][0]
    assert today_call.kwargs["start"] == datetime(2025, 3, 10)
    assert today_call.kwargs["end"] == datetime(2025, 3, 11)
    assert FIXED_NOW.date() == today_call.kwargs["start"].date()
