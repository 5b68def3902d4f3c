"""
Test configuration and fixtures.

Provides:
- Settings pointing at a temporary store, once per storage backend
- JWT token minting for authenticated requests
- HTTPX AsyncClient bound to the app in-process
"""
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import jwt
import pytest
from httpx import ASGITransport, AsyncClient

from formbuilder.app import create_app
from formbuilder.config import Settings
from formbuilder.storage import init_storage

JWT_SECRET = "test-secret"
OWNER_A = "user-a"
OWNER_B = "user-b"


def make_token(user_id: str, secret: str = JWT_SECRET, **extra) -> str:
    payload = {
        "sub": user_id,
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        **extra,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture(params=["sqlite", "json"])
def settings(request, tmp_path) -> Settings:
    settings = Settings()
    settings.storage_backend = request.param
    settings.sqlite_path = tmp_path / "app.db"
    settings.json_path = tmp_path / "jsonstore.json"
    settings.auth_mode = "jwt"
    settings.jwt_secret = JWT_SECRET
    settings.jwt_algorithm = "HS256"
    return settings


@pytest.fixture
def storage(settings):
    storage = init_storage(settings)
    yield storage
    storage.close()


@pytest.fixture
def app(settings):
    app = create_app(settings)
    yield app
    app.state.storage.close()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def headers_a() -> dict[str, str]:
    return auth_headers(OWNER_A)


@pytest.fixture
def headers_b() -> dict[str, str]:
    return auth_headers(OWNER_B)


@pytest.fixture
def rsvp_fields() -> list[dict]:
    return [
        {"id": "name", "type": "text", "label": "Name", "required": True, "order": 0},
        {
            "id": "meal",
            "type": "dropdown",
            "label": "Meal",
            "required": False,
            "options": ["Fish", "Veg"],
            "order": 1,
        },
    ]
