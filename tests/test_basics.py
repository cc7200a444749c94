"""Basic unit tests for the haumea package."""

import pytest

from haumea import (
    AsyncHaumeaClient,
    HaumeaClient,
    HaumeaError,
    AuthenticationError,
    NotFoundError,
    BadRequestError,
    ServerError,
    DecodeError,
    NetworkError,
    ValidationError,
    ClientClosedError,
    Platform,
    Severity,
    __version__,
)
from haumea.models.identity import USER_ID_ALPHABET, ClientIdentity, generate_user_id
from haumea.platform import resolve_platform


def test_version():
    assert __version__ == "1.0.1"


def test_public_exports():
    assert HaumeaClient is not None
    assert AsyncHaumeaClient is not None


def test_error_hierarchy():
    for cls in (AuthenticationError, NotFoundError, BadRequestError, ServerError,
                DecodeError, NetworkError, ValidationError, ClientClosedError):
        assert issubclass(cls, HaumeaError)
    assert issubclass(ValidationError, ValueError)


def test_error_attributes():
    err = HaumeaError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None
    assert err.status_code is None

    auth = AuthenticationError()
    assert auth.code == "authentication_error"
    assert auth.status_code == 401
    assert str(auth) == "Invalid or missing API key"

    server = ServerError("Server error: Bad Gateway", status_code=502)
    assert server.code == "server_error"
    assert server.status_code == 502


def test_enum_values():
    assert Platform.ANDROID == "android"
    assert Platform.IOS == "ios"
    assert [s.value for s in Severity] == ["debug", "info", "warn", "error"]


def test_resolve_platform():
    assert resolve_platform("Android") is Platform.ANDROID
    assert resolve_platform(" ios ") is Platform.IOS
    assert resolve_platform(Platform.IOS) is Platform.IOS
    assert resolve_platform("windows") is None


def test_generated_user_id():
    user_id = generate_user_id()
    assert len(user_id) == 16
    assert set(user_id) <= set(USER_ID_ALPHABET)


def test_identity_only_user_id_is_mutable():
    identity = ClientIdentity(api_key="key", app_id="app", platform=Platform.ANDROID)
    identity.user_id = "user123"
    assert identity.user_id == "user123"
    with pytest.raises(Exception):
        identity.api_key = "other"


def test_identity_headers():
    identity = ClientIdentity(api_key="key", app_id="app", platform=Platform.IOS, user_id="u1")
    assert identity.headers() == {"x-api-key": "key", "app-id": "app", "platform": "ios"}
    assert identity.user_headers()["userid"] == "u1"
