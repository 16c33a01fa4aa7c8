"""
Invoice endpoints, including PDF document download.
"""

import pytest


@pytest.fixture
def invoice(client, appointment):
    resp = client.post(
        "/api/invoices",
        json={
            "appointmentId": appointment["id"],
            "patientId": appointment["patientId"],
            "items": [
                {"description": "Consult", "quantity": 1, "unitPrice": "50.00"},
                {"description": "Lab", "quantity": 2, "unitPrice": "15.00"},
            ],
        },
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


@pytest.mark.integration
@pytest.mark.invoice
class TestInvoiceEndpoints:
    def test_create_computes_total(self, invoice):
        assert invoice["totalAmount"] == "80.00"
        assert invoice["status"] == "Unpaid"
        assert invoice["paidAt"] is None
        assert invoice["hasDocument"] is True
        assert [i["lineTotal"] for i in invoice["items"]] == ["50.00", "30.00"]

    def test_patient_mismatch_is_400(self, client, appointment):
        other = client.post(
            "/api/patients", json={"fullName": "Maria Souza", "email": "maria@example.com"}
        ).get_json()

        resp = client.post(
            "/api/invoices",
            json={"appointmentId": appointment["id"], "patientId": other["id"], "items": []},
        )

        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Appointment and patient mismatch."

    def test_mark_paid(self, client, invoice):
        resp = client.post(f"/api/invoices/{invoice['id']}/pay")

        assert resp.status_code == 200
        assert resp.get_json()["status"] == "Paid"
        assert resp.get_json()["paidAt"] is not None

    def test_get_invoice(self, client, invoice):
        resp = client.get(f"/api/invoices/{invoice['id']}")

        assert resp.status_code == 200
        assert resp.get_json()["totalAmount"] == "80.00"

    def test_unknown_invoice_is_404(self, client):
        assert client.get("/api/invoices/999").status_code == 404
        assert client.post("/api/invoices/999/pay").status_code == 404

    def test_document_is_pdf(self, client, invoice):
        resp = client.get(f"/api/invoices/{invoice['id']}/document")

        assert resp.status_code == 200
        assert resp.mimetype == "application/pdf"
        assert resp.data.startswith(b"%PDF")
