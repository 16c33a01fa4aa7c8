"""
Unit tests for request parsing/validation and response serialization.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from clinic.core.exceptions import ValidationError
from clinic.domain.entities import (
    AppointmentStatus,
    Invoice,
    InvoiceItem,
    InvoiceStatus,
)
from clinic.schemas import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AppointmentStatusUpdateRequest,
    InvoiceCreateRequest,
    InvoiceResponse,
    MedicineRequest,
    MedicineResponse,
    PatientCreateRequest,
    PrescriptionCreateRequest,
)
from tests.fixtures.domain_fixtures import make_appointment, make_medicine


@pytest.mark.unit
class TestAppointmentRequests:
    def test_parses_camel_case_payload(self):
        request = AppointmentCreateRequest.from_dict(
            {
                "doctorId": 1,
                "patientId": "2",
                "scheduledAt": "2025-03-11T10:00:00Z",
                "reason": "  Checkup ",
            }
        )
        request.validate()

        assert request.doctor_id == 1
        assert request.patient_id == 2
        assert request.scheduled_at == datetime(2025, 3, 11, 10, 0)
        assert request.reason == "Checkup"

    def test_offset_datetime_is_normalized_to_utc(self):
        request = AppointmentCreateRequest.from_dict(
            {"doctorId": 1, "patientId": 1, "scheduledAt": "2025-03-11T10:00:00-03:00"}
        )

        assert request.scheduled_at == datetime(2025, 3, 11, 13, 0)

    @pytest.mark.parametrize(
        "payload",
        [
            {"patientId": 1, "scheduledAt": "2025-03-11T10:00:00"},
            {"doctorId": "abc", "patientId": 1, "scheduledAt": "2025-03-11T10:00:00"},
            {"doctorId": 1, "patientId": 1, "scheduledAt": "tomorrow"},
            {"doctorId": True, "patientId": 1, "scheduledAt": "2025-03-11T10:00:00"},
        ],
    )
    def test_bad_payloads_are_rejected(self, payload):
        with pytest.raises(ValidationError):
            AppointmentCreateRequest.from_dict(payload)

    def test_reason_length_limit(self):
        request = AppointmentCreateRequest.from_dict(
            {
                "doctorId": 1,
                "patientId": 1,
                "scheduledAt": "2025-03-11T10:00:00",
                "reason": "x" * 501,
            }
        )

        with pytest.raises(ValidationError, match="reason must be at most 500"):
            request.validate()

    def test_status_is_case_insensitive(self):
        request = AppointmentStatusUpdateRequest.from_dict({"status": "approved"})

        assert request.status == AppointmentStatus.APPROVED

    def test_unknown_status(self):
        with pytest.raises(ValidationError, match="Invalid status"):
            AppointmentStatusUpdateRequest.from_dict({"status": "Cancelled"})


@pytest.mark.unit
class TestOtherRequests:
    def test_patient_requires_valid_email(self):
        request = PatientCreateRequest.from_dict(
            {"fullName": "Maria", "email": "not-an-email"}
        )

        with pytest.raises(ValidationError, match="Valid email is required"):
            request.validate()

    def test_prescription_requires_items(self):
        request = PrescriptionCreateRequest.from_dict(
            {"appointmentId": 1, "doctorId": 1, "patientId": 1, "items": []}
        )

        with pytest.raises(ValidationError, match="At least one prescription item"):
            request.validate()

    def test_prescription_item_quantity_must_be_positive(self):
        request = PrescriptionCreateRequest.from_dict(
            {
                "appointmentId": 1,
                "doctorId": 1,
                "patientId": 1,
                "items": [{"medicineId": 1, "quantity": 0}],
            }
        )

        with pytest.raises(ValidationError, match="Quantity must be greater than zero."):
            request.validate()

    def test_medicine_price_is_rounded_to_cents(self):
        request = MedicineRequest.from_dict(
            {
                "name": "Ibuprofen",
                "quantity": 10,
                "minimumThreshold": 2,
                "pricePerUnit": "1.239",
            }
        )

        assert request.price_per_unit == Decimal("1.24")
        assert request.is_active is True

    def test_medicine_negative_quantity(self):
        request = MedicineRequest.from_dict(
            {"name": "Ibuprofen", "quantity": -1, "minimumThreshold": 2, "pricePerUnit": 1}
        )

        with pytest.raises(ValidationError, match="quantity cannot be negative"):
            request.validate()

    def test_medicine_price_must_be_numeric(self):
        with pytest.raises(ValidationError, match="pricePerUnit must be a number"):
            MedicineRequest.from_dict(
                {"name": "X", "quantity": 1, "minimumThreshold": 0, "pricePerUnit": "abc"}
            )

    @pytest.mark.parametrize("price", ["1e30", "10000000000000000", -1e17])
    def test_medicine_price_beyond_column_range(self, price):
        with pytest.raises(ValidationError, match="pricePerUnit is out of range"):
            MedicineRequest.from_dict(
                {"name": "X", "quantity": 1, "minimumThreshold": 0, "pricePerUnit": price}
            )

    def test_largest_storable_price_is_accepted(self):
        request = MedicineRequest.from_dict(
            {
                "name": "X",
                "quantity": 1,
                "minimumThreshold": 0,
                "pricePerUnit": "9999999999999999.99",
            }
        )

        assert request.price_per_unit == Decimal("9999999999999999.99")

    @pytest.mark.parametrize("doctor_id", [10**30, "2147483648", -(2**31) - 1])
    def test_ids_beyond_integer_column_range(self, doctor_id):
        with pytest.raises(ValidationError, match="doctorId is out of range"):
            AppointmentCreateRequest.from_dict(
                {
                    "doctorId": doctor_id,
                    "patientId": 1,
                    "scheduledAt": "2030-01-01T10:00:00",
                }
            )

    def test_medicine_quantity_beyond_integer_column_range(self):
        with pytest.raises(ValidationError, match="quantity is out of range"):
            MedicineRequest.from_dict(
                {"name": "X", "quantity": 2**31, "minimumThreshold": 0, "pricePerUnit": 1}
            )

    def test_invoice_item_quantity_defaults_to_one(self):
        request = InvoiceCreateRequest.from_dict(
            {
                "appointmentId": 1,
                "patientId": 1,
                "items": [{"description": "Consult", "unitPrice": "50"}],
            }
        )
        request.validate()

        assert request.items[0].quantity == 1
        assert request.items[0].unit_price == Decimal("50.00")

    def test_items_must_be_a_list(self):
        with pytest.raises(ValidationError, match="items must be a list"):
            InvoiceCreateRequest.from_dict(
                {"appointmentId": 1, "patientId": 1, "items": "Consult"}
            )


@pytest.mark.unit
class TestResponses:
    def test_appointment_response_keys(self):
        data = AppointmentResponse.from_domain(make_appointment()).to_dict()

        assert data["doctorId"] == 1
        assert data["status"] == "Pending"
        assert data["scheduledAt"] == "2025-03-11T09:00:00"
        assert data["completedAt"] is None

    def test_medicine_response_money_and_low_stock(self):
        data = MedicineResponse.from_domain(
            make_medicine(quantity=5, minimum_threshold=5)
        ).to_dict()

        assert data["pricePerUnit"] == "0.50"
        assert data["isLowStock"] is True

    def test_invoice_response_lines(self):
        invoice = Invoice(
            id=3,
            appointment_id=1,
            patient_id=1,
            items=[InvoiceItem(description="Lab", quantity=2, unit_price=Decimal("15.00"))],
            total_amount=Decimal("30.00"),
            status=InvoiceStatus.UNPAID,
        )

        data = InvoiceResponse.from_domain(invoice).to_dict()

        assert data["totalAmount"] == "30.00"
        assert data["status"] == "Unpaid"
        assert data["hasDocument"] is False
        assert data["items"][0]["lineTotal"] == "30.00"
