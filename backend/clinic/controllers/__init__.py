from .appointment_controller import appointment_bp
from .consultation_controller import consultation_bp
from .dashboard_controller import dashboard_bp
from .health_controller import health_bp
from .inventory_controller import inventory_bp
from .invoice_controller import invoice_bp
from .patient_controller import doctor_bp, patient_bp
from .prescription_controller import prescription_bp

API_BLUEPRINTS = (
    appointment_bp,
    consultation_bp,
    prescription_bp,
    inventory_bp,
    invoice_bp,
    patient_bp,
    doctor_bp,
    dashboard_bp,
)

__all__ = [
    "API_BLUEPRINTS",
    "appointment_bp",
    "consultation_bp",
    "dashboard_bp",
    "doctor_bp",
    "health_bp",
    "inventory_bp",
    "invoice_bp",
    "patient_bp",
    "prescription_bp",
]
