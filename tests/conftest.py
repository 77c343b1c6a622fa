from __future__ import annotations

import os
from typing import Any, Optional

import mongomock
import pytest
from fastapi.testclient import TestClient

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "SecretPass123"


def pytest_configure() -> None:
    from passlib.hash import pbkdf2_sha256

    # Settings come from the environment; never from a developer's .env values.
    os.environ["ADMIN_EMAIL"] = ADMIN_EMAIL
    os.environ["ADMIN_PASSWORD_HASH"] = pbkdf2_sha256.hash(ADMIN_PASSWORD)
    os.environ["JWT_SECRET_KEY"] = "test-secret"
    os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
    os.environ["MONGODB_DB"] = "careerhq_test"
    os.environ["AUTOMATION_API_TOKEN"] = "test-token"
    os.environ["DEBUG"] = "false"

    from careerhq.core.config import get_settings

    get_settings.cache_clear()


class FakeMedia:
    """Stands in for Cloudinary: records uploads and deletions."""

    def __init__(self) -> None:
        self.uploaded: list[tuple[str, bytes]] = []
        self.deleted: list[str] = []

    def upload(self, content: bytes, folder: str) -> Any:
        from careerhq.services.media_service import UploadedImage

        self.uploaded.append((folder, content))
        public_id = f"{folder}/image-{len(self.uploaded)}"
        return UploadedImage(public_id=public_id, url=f"https://res.cloudinary.com/test/{public_id}")

    def delete(self, public_id: str) -> None:
        self.deleted.append(public_id)

    def replace(self, content: Optional[bytes], current_id: Optional[str], folder: str) -> Optional[str]:
        from careerhq.services.media_service import MediaService

        return MediaService.replace(self, content, current_id, folder)  # type: ignore[arg-type]


class FakeAutomation:
    """Stands in for the CRM automation API."""

    def __init__(self) -> None:
        self.submitted: list[dict[str, str]] = []
        self.fail = False

    def submit_contact(self, name: str, email: str, phone: str) -> dict:
        from careerhq.core.errors import UpstreamError

        if self.fail:
            raise UpstreamError("Failed to submit form")
        self.submitted.append({"name": name, "email": email, "phone": phone})
        return {"status": "ok"}


@pytest.fixture()
def store() -> Any:
    from careerhq.db.mongodb import MongoStore

    mongo = MongoStore("mongodb://localhost:27017", "careerhq_test", client_factory=mongomock.MongoClient)
    yield mongo
    mongo.close()


@pytest.fixture()
def media() -> FakeMedia:
    return FakeMedia()


@pytest.fixture()
def automation() -> FakeAutomation:
    return FakeAutomation()


@pytest.fixture()
def client(store: Any, media: FakeMedia, automation: FakeAutomation) -> Any:
    from careerhq.core.config import get_settings
    from careerhq.main import create_app

    app = create_app(settings=get_settings(), store=store, media=media, automation=automation)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    from careerhq.core.auth import create_access_token

    token = create_access_token(data={"sub": ADMIN_EMAIL, "role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def country(client: Any, admin_headers: dict[str, str]) -> dict:
    response = client.post(
        "/api/countries",
        json={"name": "United Kingdom", "code": "uk", "currency": "GBP"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    return response.json()["country"]


@pytest.fixture()
def university(client: Any, admin_headers: dict[str, str], country: dict) -> dict:
    response = client.post(
        "/api/universities",
        json={
            "name": "University of Oxford",
            "countryId": country["id"],
            "location": "Oxford",
            "type": "Public",
            "ranking": 3,
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    return response.json()["university"]
