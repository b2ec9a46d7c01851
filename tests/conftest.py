# tests/conftest.py
from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.dependencies import get_employee_store, get_photo_uploader
from app.main import create_app
from tests.fakes import InMemoryEmployeeStore, RecordingSender

VALID_PAYLOAD = {
    "nom": "Kouame",
    "prenom": "Jean",
    "poste": "Dev",
    "dateNaissance": "1990-01-01",
    "pin": "1234",
    "confirmPin": "1234",
}


def make_settings(**overrides) -> Settings:
    values = {
        "AIRTABLE_API_KEY": "keyTest",
        "AIRTABLE_BASE_ID": "appTest",
        "NOTIFY_SHUTDOWN_TIMEOUT": 2.0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def build_app(settings: Settings, store, sender=None, uploader=None) -> FastAPI:
    """App réelle, avec la table Airtable et Cloudinary remplacés par des doubles."""
    app = create_app(settings, email_sender=sender)
    app.dependency_overrides[get_employee_store] = lambda: store
    app.dependency_overrides[get_photo_uploader] = lambda: uploader
    return app


@pytest.fixture
def payload() -> dict[str, str]:
    return dict(VALID_PAYLOAD)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def store() -> InMemoryEmployeeStore:
    return InMemoryEmployeeStore()


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def app(settings: Settings, store: InMemoryEmployeeStore, sender: RecordingSender) -> FastAPI:
    return build_app(settings, store, sender)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
