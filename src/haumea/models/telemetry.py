"""
Telemetry request/acknowledgement models — addEvent and addLog.
"""

import time
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def now_ms() -> int:
    return int(time.time() * 1000)


class Severity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class AddEventRequest(BaseModel):
    """POST /addEvent body"""
    name: str = Field(min_length=1)
    timestamp: int = Field(default_factory=now_ms)
    params: dict[str, str] = Field(default_factory=dict)

    @field_validator("params", mode="before")
    @classmethod
    def _stringify_params(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(k): _scalar_to_str(val) for k, val in v.items()}
        return v


class AddLogRequest(BaseModel):
    """POST /addLog body"""
    severity: Severity
    message: str
    timestamp: int = Field(default_factory=now_ms)


class BaseResponse(BaseModel):
    """Acknowledgement handed to on_success."""
    success: bool = True
    message: Optional[str] = None


def _scalar_to_str(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    # Nested structures are rejected by the dict[str, str] field
    return value
