"""
Shared fixtures: every test gets a fresh in-memory SQLite database.
"""

import os

# tvlocker.main builds a default app at import time
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from tvlocker.database import create_db_engine, make_session_factory
from tvlocker.lifecycle import DeviceLifecycle
from tvlocker.main import create_app
from tvlocker.models import Base
from tvlocker.store import DeviceStore


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = make_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def lifecycle(db):
    return DeviceLifecycle(DeviceStore(db))


@pytest.fixture
def client(engine):
    return TestClient(create_app(engine), raise_server_exceptions=False)


def register_payload(**overrides) -> dict:
    payload = {
        "serial_number": "TV1",
        "customer_name": "Asha Rao",
        "phone_number": "+91 98450 00000",
        "emi_term": 3,
        "emi_start_date": "2024-01-01",
        "term_duration": 15,
    }
    payload.update(overrides)
    return payload
