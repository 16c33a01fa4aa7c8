"""
Database seeding functions.

Registers a ``flask seed-demo`` command that inserts a demo doctor, patient
and a few medicines so the API can be exercised locally. The command is
idempotent: records are matched by name and only created when missing.
"""

import logging
from decimal import Decimal

import click

from clinic.db.base import Doctor, Medicine, Patient
from clinic.db.session import SessionLocal

logger = logging.getLogger(__name__)

DEMO_MEDICINES = (
    ("Paracetamol 500mg", 120, 20, "tablet", Decimal("0.25")),
    ("Amoxicillin 250mg", 40, 15, "capsule", Decimal("0.60")),
    ("Ibuprofen 400mg", 8, 10, "tablet", Decimal("0.30")),
)


def seed_demo_data() -> dict:
    """Insert demo records that are not already present. Returns counts created."""
    created = {"doctors": 0, "patients": 0, "medicines": 0}
    with SessionLocal() as db:
        if not db.query(Doctor).filter_by(full_name="Dr. Ana Costa").first():
            db.add(
                Doctor(
                    full_name="Dr. Ana Costa",
                    specialization="General Practice",
                    email="ana.costa@clinic.local",
                )
            )
            created["doctors"] += 1

        if not db.query(Patient).filter_by(email="joao.silva@example.com").first():
            db.add(
                Patient(
                    full_name="Joao Silva",
                    email="joao.silva@example.com",
                    phone_number="+351900000000",
                )
            )
            created["patients"] += 1

        for name, quantity, threshold, unit, price in DEMO_MEDICINES:
            if not db.query(Medicine).filter_by(name=name, is_active=True).first():
                db.add(
                    Medicine(
                        name=name,
                        quantity=quantity,
                        minimum_threshold=threshold,
                        unit=unit,
                        price_per_unit=price,
                    )
                )
                created["medicines"] += 1

        db.commit()

    logger.info("Demo data seeded", extra={"context": created})
    return created


def register_cli(app) -> None:
    @app.cli.command("seed-demo")
    def seed_demo_command():
        """Insert demo doctor, patient and medicines."""
        created = seed_demo_data()
        click.echo(
            "Seeded {doctors} doctor(s), {patients} patient(s), "
            "{medicines} medicine(s).".format(**created)
        )
