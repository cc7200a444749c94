"""
Haumea error types — one class per failure category of the remote API.
"""

from typing import Any, Optional


class HaumeaError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code


class AuthenticationError(HaumeaError):
    def __init__(self, message: str = "Invalid or missing API key", status_code: Optional[int] = 401):
        super().__init__("authentication_error", message, status_code=status_code)


class NotFoundError(HaumeaError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None, status_code: Optional[int] = 404):
        super().__init__("not_found", message, details, status_code)


class BadRequestError(HaumeaError):
    def __init__(self, message: str, status_code: Optional[int] = 400):
        super().__init__("bad_request", message, status_code=status_code)


class ServerError(HaumeaError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None, status_code: Optional[int] = None):
        super().__init__("server_error", message, details, status_code)


class DecodeError(HaumeaError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None, status_code: Optional[int] = None):
        super().__init__("decode_error", message, details, status_code)


class NetworkError(HaumeaError):
    def __init__(self, message: str):
        super().__init__("network_error", message)


class ValidationError(HaumeaError, ValueError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("validation_error", message, details)


class ClientClosedError(HaumeaError):
    def __init__(self, message: str = "Client is closed"):
        super().__init__("client_closed", message)
