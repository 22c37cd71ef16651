import pytest
from fastapi.testclient import TestClient

from rover_shop.config import Settings
from rover_shop.main import create_app
from rover_shop.storage.memory import MemoryStore


@pytest.fixture
def staff_headers():
    return {"X-Staff-User": "teacher", "X-Staff-Pin": "1234"}


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def client(store):
    """HTTP client against an app backed by an in-memory store"""
    app = create_app(settings=Settings(staff_pin="1234"), store=store)
    with TestClient(app) as c:
        yield c
