"""
Shared fixtures for the Warung Kasir test suite.
"""

import io
from typing import Any, Dict, List, Tuple

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient

from kasir.core.config import Settings
from kasir.db.database import Database
from kasir.main import create_application
from kasir.services.file_service import FileStorage
from kasir.services.lifecycle_service import OrderLifecycle
from kasir.services.order_service import OrderService


LOGIN_HEADERS = {"X-Logged-In": "true"}


class RecordingHub:
    """Stands in for NotificationHub and keeps every broadcast in order."""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    async def broadcast(self, event: str, payload: Dict[str, Any]) -> int:
        self.events.append((event, payload))
        return 1

    def subscriber_count(self) -> int:
        return 0

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


def make_upload(content: bytes = b"\x89PNG fake image", filename: str = "bukti.png") -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


def cart_item(name: str = "Sate", quantity: int = 2, price: float = 12500, note: str = "") -> Dict[str, Any]:
    return {"name": name, "quantity": quantity, "price": price, "note": note}


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        CASHIER_USERNAME="pakkasir",
        CASHIER_PASSWORD="rahasia",
    )


@pytest.fixture
def database(settings):
    db = Database(settings.DATABASE_URL)
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    db = database.session()
    yield db
    db.close()


@pytest.fixture
def store(session):
    return OrderService(session)


@pytest.fixture
def files(settings):
    storage = FileStorage(settings.UPLOAD_DIR)
    storage.ensure_dir()
    return storage


@pytest.fixture
def hub():
    return RecordingHub()


@pytest.fixture
def lifecycle(store, files, hub):
    return OrderLifecycle(store=store, files=files, hub=hub)


@pytest.fixture
def app(settings):
    return create_application(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
