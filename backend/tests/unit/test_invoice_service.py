"""
Unit tests for InvoiceService: totals, ownership, payment and documents.
"""

from decimal import Decimal

import pytest

from clinic.core.exceptions import InvalidStateError, NotFoundError
from clinic.domain.entities import Invoice, InvoiceItem, InvoiceStatus
from clinic.services.invoice_service import InvoiceService
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    InvoiceRepositoryFactory,
    PatientRepositoryFactory,
    create_mock_renderer,
)
from tests.fixtures.domain_fixtures import FIXED_NOW, make_appointment, make_patient


@pytest.fixture
def mock_invoice_repo():
    return InvoiceRepositoryFactory.create_mock_full()


@pytest.fixture
def mock_appointment_repo():
    repo = AppointmentRepositoryFactory.create_mock_full()
    repo.get_by_id.return_value = make_appointment(patient_id=1)
    return repo


@pytest.fixture
def mock_patient_repo():
    repo = PatientRepositoryFactory.create_mock_full()
    repo.get_by_id.return_value = make_patient(id=1)
    return repo


@pytest.fixture
def renderer():
    return create_mock_renderer()


@pytest.fixture
def service(
    mock_invoice_repo, mock_appointment_repo, mock_patient_repo, renderer, uow, clock
):
    return InvoiceService(
        mock_invoice_repo,
        mock_appointment_repo,
        mock_patient_repo,
        renderer,
        uow,
        clock=clock,
    )


@pytest.mark.services
@pytest.mark.invoice
class TestInvoiceCreation:
    def test_total_is_sum_of_lines(self, service, renderer):
        invoice = service.create(
            1,
            1,
            [
                InvoiceItem(description="Consult", quantity=1, unit_price=Decimal("50.00")),
                InvoiceItem(description="Lab", quantity=2, unit_price=Decimal("15.00")),
            ],
        )

        assert invoice.total_amount == Decimal("80.00")
        assert invoice.status == InvoiceStatus.UNPAID
        assert invoice.created_at == FIXED_NOW
        assert invoice.document == b"%PDF-1.4 test"
        # Rendered after the id is assigned
        rendered_invoice = renderer.render.call_args[0][0]
        assert rendered_invoice.id == 1

    def test_total_uses_exact_decimal_arithmetic(self, service):
        invoice = service.create(
            1,
            1,
            [
                InvoiceItem(description="A", quantity=3, unit_price=Decimal("0.10")),
                InvoiceItem(description="B", quantity=1, unit_price=Decimal("0.20")),
            ],
        )

        assert invoice.total_amount == Decimal("0.50")

    def test_empty_invoice_totals_zero(self, service):
        invoice = service.create(1, 1, [])

        assert invoice.total_amount == Decimal("0.00")

    def test_patient_mismatch(self, service, mock_appointment_repo, mock_patient_repo):
        mock_patient_repo.get_by_id.return_value = make_patient(id=2)

        with pytest.raises(InvalidStateError, match="Appointment and patient mismatch."):
            service.create(1, 2, [])

    def test_missing_appointment(self, service, mock_appointment_repo):
        mock_appointment_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match="Appointment not found."):
            service.create(1, 1, [])

    def test_missing_patient(self, service, mock_patient_repo):
        mock_patient_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match="Patient not found."):
            service.create(1, 1, [])


@pytest.mark.services
@pytest.mark.invoice
class TestInvoicePaymentAndDocument:
    def test_mark_paid(self, service, mock_invoice_repo):
        mock_invoice_repo.get_by_id.return_value = Invoice(id=5, appointment_id=1, patient_id=1)

        invoice = service.mark_paid(5)

        assert invoice.status == InvoiceStatus.PAID
        assert invoice.paid_at == FIXED_NOW

    def test_mark_paid_twice_restamps(self, mock_invoice_repo, mock_appointment_repo, mock_patient_repo, renderer, uow):
        times = iter([FIXED_NOW, FIXED_NOW.replace(hour=12)])
        service = InvoiceService(
            mock_invoice_repo,
            mock_appointment_repo,
            mock_patient_repo,
            renderer,
            uow,
            clock=lambda: next(times),
        )
        invoice = Invoice(id=5, appointment_id=1, patient_id=1)
        mock_invoice_repo.get_by_id.return_value = invoice

        service.mark_paid(5)
        second = service.mark_paid(5)

        assert second.status == InvoiceStatus.PAID
        assert second.paid_at == FIXED_NOW.replace(hour=12)

    def test_mark_paid_missing(self, service):
        with pytest.raises(NotFoundError, match="Invoice not found."):
            service.mark_paid(77)

    def test_stored_document_is_returned(self, service, mock_invoice_repo, renderer):
        mock_invoice_repo.get_by_id.return_value = Invoice(
            id=5, appointment_id=1, patient_id=1, document=b"stored"
        )

        assert service.get_document(5) == b"stored"
        renderer.render.assert_not_called()

    def test_missing_document_is_rendered_and_stored(
        self, service, mock_invoice_repo, renderer
    ):
        mock_invoice_repo.get_by_id.return_value = Invoice(
            id=5, appointment_id=1, patient_id=1
        )

        document = service.get_document(5)

        assert document == b"%PDF-1.4 test"
        stored = mock_invoice_repo.update.call_args[0][0]
        assert stored.document == b"%PDF-1.4 test"

    def test_document_for_missing_invoice(self, service):
        with pytest.raises(NotFoundError):
            service.get_document(12)
