"""
Prescription endpoints: atomic multi-item dispensing against the real database.
"""

import pytest


def _prescribe(client, appointment, items):
    return client.post(
        "/api/prescriptions",
        json={
            "appointmentId": appointment["id"],
            "doctorId": appointment["doctorId"],
            "patientId": appointment["patientId"],
            "items": items,
        },
    )


@pytest.mark.integration
@pytest.mark.prescription
class TestPrescriptionEndpoints:
    def test_prescription_deducts_stock(self, client, approved_appointment, create_medicine):
        medicine = create_medicine(quantity=10, minimum_threshold=5)

        resp = _prescribe(
            client,
            approved_appointment,
            [{"medicineId": medicine["id"], "quantity": 6, "dosage": "1 tablet"}],
        )

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["items"][0]["medicineName"] == "Paracetamol"
        assert body["items"][0]["quantity"] == 6
        stock = client.get(f"/api/medicines/{medicine['id']}").get_json()
        assert stock["quantity"] == 4
        assert stock["isLowStock"] is True

    def test_failed_item_rolls_back_whole_prescription(
        self, client, approved_appointment, create_medicine
    ):
        first = create_medicine(name="Paracetamol", quantity=10)
        second = create_medicine(name="Ibuprofen", quantity=1)

        resp = _prescribe(
            client,
            approved_appointment,
            [
                {"medicineId": first["id"], "quantity": 3},
                {"medicineId": second["id"], "quantity": 2},
            ],
        )

        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Insufficient stock for Ibuprofen. Available: 1."
        assert client.get(f"/api/medicines/{first['id']}").get_json()["quantity"] == 10
        assert client.get(f"/api/medicines/{second['id']}").get_json()["quantity"] == 1
        listed = client.get(f"/api/prescriptions/patient/{approved_appointment['patientId']}")
        assert listed.get_json() == []

    def test_pending_appointment_is_rejected(self, client, appointment, create_medicine):
        medicine = create_medicine()

        resp = _prescribe(client, appointment, [{"medicineId": medicine["id"], "quantity": 1}])

        assert resp.status_code == 400
        assert client.get(f"/api/medicines/{medicine['id']}").get_json()["quantity"] == 10

    def test_unknown_medicine_is_404(self, client, approved_appointment):
        resp = _prescribe(client, approved_appointment, [{"medicineId": 999, "quantity": 1}])

        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Medicine not found."

    def test_empty_items_is_400(self, client, approved_appointment):
        resp = _prescribe(client, approved_appointment, [])

        assert resp.status_code == 400
        assert resp.get_json()["message"] == "At least one prescription item is required"

    def test_get_and_list_for_patient(self, client, approved_appointment, create_medicine):
        medicine = create_medicine()
        created = _prescribe(
            client, approved_appointment, [{"medicineId": medicine["id"], "quantity": 1}]
        ).get_json()

        fetched = client.get(f"/api/prescriptions/{created['id']}")
        listed = client.get(f"/api/prescriptions/patient/{approved_appointment['patientId']}")

        assert fetched.status_code == 200
        assert fetched.get_json()["id"] == created["id"]
        assert [p["id"] for p in listed.get_json()] == [created["id"]]

    def test_referenced_medicine_cannot_be_deleted(
        self, client, approved_appointment, create_medicine
    ):
        medicine = create_medicine()
        _prescribe(client, approved_appointment, [{"medicineId": medicine["id"], "quantity": 1}])

        resp = client.delete(f"/api/medicines/{medicine['id']}")

        assert resp.status_code == 400
        assert client.get(f"/api/medicines/{medicine['id']}").status_code == 200
