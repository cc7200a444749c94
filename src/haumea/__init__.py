"""
haumea — Haumea Labs SDK for Python.

Remote configuration plus fire-and-forget event and log reporting
for Android and iOS apps embedding Python.
"""

from haumea.client import AsyncHaumeaClient, FetchResult, HaumeaClient
from haumea.decoder import decode_remote_response
from haumea.errors import (
    AuthenticationError,
    BadRequestError,
    ClientClosedError,
    DecodeError,
    HaumeaError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from haumea.models.remote_config import ConfigFailure, ConfigSuccess
from haumea.models.telemetry import BaseResponse, Severity
from haumea.platform import Platform
from haumea.store import ConfigStore
from haumea.version import __version__

__all__ = [
    "AsyncHaumeaClient",
    "HaumeaClient",
    "FetchResult",
    "ConfigStore",
    "decode_remote_response",
    "ConfigSuccess",
    "ConfigFailure",
    "BaseResponse",
    "Severity",
    "Platform",
    "HaumeaError",
    "AuthenticationError",
    "NotFoundError",
    "BadRequestError",
    "ServerError",
    "DecodeError",
    "NetworkError",
    "ValidationError",
    "ClientClosedError",
    "__version__",
]
