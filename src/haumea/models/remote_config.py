"""
Remote config envelopes and decode results.

The config endpoint answers with one of two untagged JSON shapes. The
envelope models below accept a body only when its fields fit that shape;
anything else is left to the decoder's fallback.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SUCCESS_KEYS = ("remote-flags", "data", "flags")


def _as_flag_value(value: Any) -> Any:
    # JSON spelling for booleans; numbers keep their repr
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class FlagPair(BaseModel):
    model_config = ConfigDict(extra="ignore")

    key: str
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> Any:
        return _as_flag_value(v)


class SuccessEnvelope(BaseModel):
    """`{"remote-flags": {...}, "data": {...}?, "message": "..."?}` or `{"flags": [{key, value}]}`"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    remote_flags: Optional[dict[str, str]] = Field(default=None, alias="remote-flags")
    data: Optional[dict[str, str]] = None
    flags: Optional[list[FlagPair]] = None
    message: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _require_success_shape(cls, raw: Any) -> Any:
        if not isinstance(raw, dict):
            raise ValueError("success envelope must be a JSON object")
        if raw.get("success") is False:
            raise ValueError("envelope declares success: false")
        if not any(key in raw for key in SUCCESS_KEYS):
            raise ValueError("envelope carries none of: " + ", ".join(SUCCESS_KEYS))
        return raw

    @field_validator("remote_flags", "data", mode="before")
    @classmethod
    def _coerce_values(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {k: _as_flag_value(val) for k, val in v.items()}
        return v

    def resolved_flags(self) -> dict[str, str]:
        """remote-flags when non-empty, else data, else the list-of-pairs variant, else {}."""
        if self.remote_flags:
            return dict(self.remote_flags)
        if self.data is not None:
            return dict(self.data)
        if self.flags is not None:
            return {pair.key: pair.value for pair in self.flags}
        return {}


class ErrorEnvelope(BaseModel):
    """`{"success": false, "error": "...", "message"?, "app_id"?, "platform"?}`"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    success: bool = False
    error: Optional[str] = None
    message: Optional[str] = None
    app_id: Optional[str] = None
    platform: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _require_error_shape(cls, raw: Any) -> Any:
        if not isinstance(raw, dict):
            raise ValueError("error envelope must be a JSON object")
        if raw.get("success") is not False and "error" not in raw:
            raise ValueError("envelope has neither success: false nor an error field")
        return raw

    def describe(self) -> str:
        text = self.error or "Unknown error"
        if self.message is not None:
            text += f": {self.message}"
        if self.app_id is not None:
            text += f" (app_id: {self.app_id})"
        if self.platform is not None:
            text += f", platform: {self.platform}"
        return text


class ConfigSuccess(BaseModel):
    flags: dict[str, str] = Field(default_factory=dict)


class ConfigFailure(BaseModel):
    reason: str
    detail: Optional[str] = None
    app_id: Optional[str] = None
    platform: Optional[str] = None
