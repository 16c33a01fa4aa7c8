"""
Integration fixtures: seed records through the public API.
"""

from datetime import datetime, timedelta, timezone

import pytest


def future_iso(days: int = 1, hour: int = 10) -> str:
    """ISO timestamp (UTC, 'Z' suffix) ``days`` from now at a fixed hour."""
    target = (datetime.now(timezone.utc) + timedelta(days=days)).replace(
        hour=hour, minute=0, second=0, microsecond=0
    )
    return target.strftime("%Y-%m-%dT%H:%M:%SZ")


@pytest.fixture
def doctor(client) -> dict:
    resp = client.post(
        "/api/doctors",
        json={"fullName": "Dr. Ana Costa", "specialization": "Cardiology"},
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


@pytest.fixture
def patient(client) -> dict:
    resp = client.post(
        "/api/patients",
        json={"fullName": "Joao Silva", "email": "joao@example.com"},
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


@pytest.fixture
def appointment(client, doctor, patient) -> dict:
    resp = client.post(
        "/api/appointments",
        json={
            "doctorId": doctor["id"],
            "patientId": patient["id"],
            "scheduledAt": future_iso(days=2),
            "reason": "Chest pain",
        },
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


@pytest.fixture
def approved_appointment(client, appointment) -> dict:
    resp = client.patch(
        f"/api/appointments/{appointment['id']}/status", json={"status": "Approved"}
    )
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


@pytest.fixture
def create_medicine(client):
    """Factory fixture: create a medicine through the API and return its JSON."""

    def _create(name="Paracetamol", quantity=10, minimum_threshold=5, price="0.50"):
        resp = client.post(
            "/api/medicines",
            json={
                "name": name,
                "quantity": quantity,
                "minimumThreshold": minimum_threshold,
                "pricePerUnit": price,
                "unit": "tablet",
            },
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _create
