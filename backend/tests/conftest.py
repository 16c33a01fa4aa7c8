"""
Central pytest configuration for the clinic backend tests.

This file provides common fixtures, test markers, and setup
for both unit and integration tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add backend directory to sys.path for imports to work
backend_root = Path(__file__).parent.parent  # backend/
sys.path.insert(0, str(backend_root))

# Test database configuration (set early so import-time engines use it)
TEST_DATABASE_URL = "sqlite:///:memory:"  # In-memory SQLite for fast tests
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["TESTING"] = "true"  # Set testing environment variable
os.environ["RATE_LIMIT_ENABLED"] = "0"  # Disable rate limiting in tests
os.environ["LOG_TO_FILE"] = "0"  # Console logging only
os.environ.setdefault("FLASK_ENV", "development")

# Import markers and shared fixtures
from tests.config.markers import *  # noqa: E402,F401,F403
from tests.fixtures.domain_fixtures import *  # noqa: E402,F401,F403
from tests.fixtures.integration_fixtures import *  # noqa: E402,F401,F403


@pytest.fixture
def app():
    """Create a Flask application backed by a fresh in-memory database."""
    from clinic.db.session import create_tables, drop_tables
    from clinic.main import create_app

    drop_tables()
    app = create_app()
    app.config.update(
        {
            "TESTING": True,
            "WTF_CSRF_ENABLED": False,  # Disable CSRF for testing
            "SECRET_KEY": "test-secret-key",
        }
    )
    create_tables()
    yield app
    drop_tables()


@pytest.fixture
def client(app):
    """Create a test client for Flask application with proper context."""
    with app.test_client() as client:
        with app.app_context():
            yield client


@pytest.fixture
def db_session(app):
    """Session on the test database for direct setup/inspection."""
    from clinic.db.session import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
