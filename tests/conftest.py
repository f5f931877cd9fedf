import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from campushub.db.fallback import FallbackStore
from campushub.db.models import Base
from campushub.db.stores import LiveStore
from campushub.main import create_app
from campushub.services.events import EventService


class FlakyLiveStore(LiveStore):
    """Reports a live connection, but every query fails."""

    def __init__(self):
        super().__init__(None)

    def is_connected(self) -> bool:
        return True


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path}/test.db", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def live_store(engine):
    return LiveStore(engine)


@pytest.fixture
def offline_store():
    return LiveStore(None)


@pytest.fixture
def fallback():
    return FallbackStore.with_sample_data()


@pytest.fixture
def live_service(live_store, fallback):
    return EventService(live_store, fallback)


@pytest.fixture
def offline_service(offline_store, fallback):
    return EventService(offline_store, fallback)


@pytest.fixture
def live_client(live_service):
    return TestClient(create_app(live_service))


@pytest.fixture
def offline_client(offline_service):
    return TestClient(create_app(offline_service))


def event_payload(**overrides):
    data = {
        "title": "Hackathon",
        "description": "24h build sprint",
        "date": "2024-03-01",
        "time": "09:00",
        "venue": "Lab 2",
        "maxParticipants": 2,
    }
    data.update(overrides)
    return data


def registrant(email="asha@example.com", **overrides):
    data = {
        "registrantName": "Asha Patil",
        "registrantEmail": email,
        "registrantPhone": "9876543210",
        "registrantClass": "TE-IT",
        "registrantRollNo": "IT2024017",
        "registrantPRN": "PRN778812",
    }
    data.update(overrides)
    return data
