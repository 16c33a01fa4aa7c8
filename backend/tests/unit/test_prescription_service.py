"""
Unit tests for PrescriptionService: gating, ownership checks and the
all-or-nothing stock deduction.
"""

from unittest.mock import Mock

import pytest

from clinic.core.exceptions import (
    InsufficientStockError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from clinic.db.unit_of_work import UnitOfWork
from clinic.domain.entities import AppointmentStatus, PrescriptionItem
from clinic.services.inventory_service import InventoryService
from clinic.services.prescription_service import PrescriptionService
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    DoctorRepositoryFactory,
    MedicineRepositoryFactory,
    PatientRepositoryFactory,
    PrescriptionRepositoryFactory,
    create_mock_notifier,
)
from tests.fixtures.domain_fixtures import (
    make_appointment,
    make_doctor,
    make_medicine,
    make_patient,
)


@pytest.fixture
def repos():
    appointment_repo = AppointmentRepositoryFactory.create_mock_full()
    appointment_repo.get_by_id.return_value = make_appointment(
        status=AppointmentStatus.APPROVED
    )
    doctor_repo = DoctorRepositoryFactory.create_mock_full()
    doctor_repo.get_by_id.return_value = make_doctor()
    patient_repo = PatientRepositoryFactory.create_mock_full()
    patient_repo.get_by_id.return_value = make_patient()
    return {
        "prescription": PrescriptionRepositoryFactory.create_mock_full(),
        "appointment": appointment_repo,
        "doctor": doctor_repo,
        "patient": patient_repo,
        "medicine": MedicineRepositoryFactory.create_mock_full(),
    }


@pytest.fixture
def notifier():
    return create_mock_notifier()


@pytest.fixture
def service(repos, uow, notifier, clock):
    inventory = InventoryService(repos["medicine"], uow, notifier, clock=clock)
    return PrescriptionService(
        prescription_repo=repos["prescription"],
        appointment_repo=repos["appointment"],
        doctor_repo=repos["doctor"],
        patient_repo=repos["patient"],
        inventory_service=inventory,
        uow=uow,
        clock=clock,
    )


def _stock(repos, medicines):
    """Wire the medicine mock to a dict of id -> Medicine."""

    def get_by_id(medicine_id):
        return medicines.get(medicine_id)

    def change_quantity(medicine_id, delta):
        medicines[medicine_id].quantity += delta
        return medicines[medicine_id]

    repos["medicine"].get_by_id.side_effect = get_by_id
    repos["medicine"].change_quantity.side_effect = change_quantity


@pytest.mark.services
@pytest.mark.prescription
class TestPrescriptionCreation:
    def test_creates_prescription_and_deducts_each_item(
        self, service, repos, mock_session
    ):
        medicines = {
            1: make_medicine(id=1, name="Paracetamol", quantity=20),
            2: make_medicine(id=2, name="Amoxicillin", quantity=15),
        }
        _stock(repos, medicines)

        prescription = service.create(
            1,
            1,
            1,
            [
                PrescriptionItem(medicine_id=1, quantity=3, dosage="500mg"),
                PrescriptionItem(medicine_id=2, quantity=5, instructions="After meals"),
            ],
        )

        assert prescription.id == 1
        assert [i.medicine_name for i in prescription.items] == [
            "Paracetamol",
            "Amoxicillin",
        ]
        assert medicines[1].quantity == 17
        assert medicines[2].quantity == 10
        mock_session.commit.assert_called_once()

    def test_failure_on_second_item_rolls_everything_back(
        self, service, repos, mock_session, notifier
    ):
        medicines = {
            1: make_medicine(id=1, name="Paracetamol", quantity=6, minimum_threshold=5),
            2: make_medicine(id=2, name="Amoxicillin", quantity=1),
        }
        _stock(repos, medicines)

        with pytest.raises(InsufficientStockError, match="Amoxicillin"):
            service.create(
                1,
                1,
                1,
                [
                    PrescriptionItem(medicine_id=1, quantity=2),
                    PrescriptionItem(medicine_id=2, quantity=5),
                ],
            )

        repos["prescription"].create.assert_not_called()
        mock_session.commit.assert_not_called()
        mock_session.rollback.assert_called_once()
        # The low-stock alert queued by the first item is discarded
        notifier.notify.assert_not_called()

    def test_unknown_medicine(self, service, repos, mock_session):
        _stock(repos, {})

        with pytest.raises(NotFoundError, match="Medicine not found."):
            service.create(1, 1, 1, [PrescriptionItem(medicine_id=9, quantity=1)])

        mock_session.rollback.assert_called_once()

    @pytest.mark.parametrize(
        "status", [AppointmentStatus.PENDING, AppointmentStatus.REJECTED]
    )
    def test_requires_clinical_status(self, service, repos, status):
        repos["appointment"].get_by_id.return_value = make_appointment(status=status)

        with pytest.raises(InvalidStateError):
            service.create(1, 1, 1, [PrescriptionItem(medicine_id=1, quantity=1)])

    @pytest.mark.parametrize("doctor_id, patient_id", [(2, 1), (1, 2)])
    def test_appointment_must_match_doctor_and_patient(
        self, service, repos, doctor_id, patient_id
    ):
        with pytest.raises(InvalidStateError, match="same doctor and patient"):
            service.create(
                1,
                doctor_id,
                patient_id,
                [PrescriptionItem(medicine_id=1, quantity=1)],
            )

        repos["medicine"].change_quantity.assert_not_called()

    def test_missing_appointment(self, service, repos):
        repos["appointment"].get_by_id.return_value = None

        with pytest.raises(NotFoundError, match="Appointment not found."):
            service.create(1, 1, 1, [PrescriptionItem(medicine_id=1, quantity=1)])

    def test_empty_items_rejected(self, service):
        with pytest.raises(ValidationError):
            service.create(1, 1, 1, [])

    def test_get_missing(self, service):
        with pytest.raises(NotFoundError):
            service.get(3)


def test_notifications_fire_after_commit(repos, notifier, clock):
    session = Mock()
    uow = UnitOfWork(session)
    inventory = InventoryService(repos["medicine"], uow, notifier, clock=clock)
    service = PrescriptionService(
        repos["prescription"],
        repos["appointment"],
        repos["doctor"],
        repos["patient"],
        inventory,
        uow,
        clock=clock,
    )
    _stock(repos, {1: make_medicine(id=1, quantity=6, minimum_threshold=5)})
    session.commit.side_effect = lambda: notifier.notify.assert_not_called()

    service.create(1, 1, 1, [PrescriptionItem(medicine_id=1, quantity=2)])

    notifier.notify.assert_called_once()
