"""
Shared test fixtures — SQLite test database, test client, document builders.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point the app at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from levelquote.database import Base, get_db
from levelquote.main import app


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def sample_document(**overrides):
    """A valid invoice/estimate payload: one $100 custom line, concrete letterhead."""
    data = {
        "customer_name": "Jane Homeowner",
        "customer_email": "jane@example.com",
        "customer_phone": "(440) 555-0100",
        "customer_address": "12 Elm St, Geneva, OH",
        "business_type": "concrete",
        "notes": "Driveway and walk",
        "service_lines": [
            {"service_type": "custom", "description": "Mudjacking - front walk", "quantity": 1, "unit": "job", "rate": 100.0},
        ],
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_payload():
    """Factory for document payloads: make_payload(customer_name="Bob")."""
    return sample_document
