"""Tests for bearer credential verification."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from starlette.requests import Request

from formbuilder.auth import HeaderAuthProvider, JWTAuthProvider, get_auth_provider
from formbuilder.config import Settings
from formbuilder.errors import Unauthorized

SECRET = "test-secret"


def _request(headers: dict[str, str]) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }
    return Request(scope)


def _token(claims: dict, secret: str = SECRET) -> str:
    return jwt.encode(claims, secret, algorithm="HS256")


def test_jwt_provider_returns_subject():
    provider = JWTAuthProvider(SECRET)
    request = _request({"Authorization": f"Bearer {_token({'sub': 'user-a'})}"})

    assert provider.authenticate(request) == "user-a"


def test_jwt_provider_accepts_legacy_user_id_claim():
    provider = JWTAuthProvider(SECRET)
    request = _request({"Authorization": f"Bearer {_token({'userId': 'legacy'})}"})

    assert provider.authenticate(request) == "legacy"


@pytest.mark.parametrize(
    "header",
    [
        None,
        "Token abc",
        "Bearer",
        f"Bearer {_token({'sub': 'user-a'}, secret='other')}",
        f"Bearer {_token({'role': 'admin'})}",
        "Bearer "
        + _token({"sub": "user-a", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)}),
    ],
)
def test_jwt_provider_rejects_bad_credentials(header):
    provider = JWTAuthProvider(SECRET)
    request = _request({"Authorization": header} if header else {})

    with pytest.raises(Unauthorized):
        provider.authenticate(request)


def test_jwt_provider_without_secret_rejects_everything():
    provider = JWTAuthProvider("")
    request = _request({"Authorization": f"Bearer {_token({'sub': 'user-a'})}"})

    with pytest.raises(Unauthorized):
        provider.authenticate(request)


def test_header_provider():
    provider = HeaderAuthProvider()

    assert provider.authenticate(_request({"X-User-Id": "gw-user"})) == "gw-user"
    with pytest.raises(Unauthorized):
        provider.authenticate(_request({}))


def test_get_auth_provider_follows_mode():
    settings = Settings()
    settings.auth_mode = "header"
    assert isinstance(get_auth_provider(settings), HeaderAuthProvider)

    settings.auth_mode = "jwt"
    assert isinstance(get_auth_provider(settings), JWTAuthProvider)


def test_header_mode_logs_gateway_warning(caplog):
    settings = Settings()
    settings.auth_mode = "header"

    with caplog.at_level("WARNING", logger="formbuilder.auth"):
        get_auth_provider(settings)

    assert "X-User-Id" in caplog.text
