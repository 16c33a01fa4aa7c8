"""
CSRF protection configuration.

Provides a centralized CSRFProtect instance that is:
1. Initialized in main.py with the Flask app
2. Imported by main.py to exempt the JSON API blueprints

Usage:
    from clinic.core.csrf_config import csrf

    csrf.exempt(appointment_bp)
"""

from flask_wtf.csrf import CSRFProtect

# Global CSRF instance - initialized in create_app()
csrf = CSRFProtect()
