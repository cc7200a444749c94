"""
Remote config response decoding.

The backend does not tag its config responses, so the body is matched by
structural fit: success shape first, error shape second, and a generic
failure when neither fits. Decoding never raises.
"""

from typing import Union

from haumea.models.remote_config import (
    ConfigFailure,
    ConfigSuccess,
    ErrorEnvelope,
    SuccessEnvelope,
)

INVALID_RESPONSE_FORMAT = "Invalid response format"

RemoteConfigResult = Union[ConfigSuccess, ConfigFailure]


def decode_remote_response(body: Union[bytes, str]) -> RemoteConfigResult:
    try:
        envelope = SuccessEnvelope.model_validate_json(body)
        return ConfigSuccess(flags=envelope.resolved_flags())
    except ValueError:
        pass

    try:
        error = ErrorEnvelope.model_validate_json(body)
    except ValueError as e:
        return ConfigFailure(reason=INVALID_RESPONSE_FORMAT, detail=str(e))
    return ConfigFailure(
        reason=error.describe(),
        app_id=error.app_id,
        platform=error.platform,
    )


def is_malformed(result: ConfigFailure) -> bool:
    return result.reason == INVALID_RESPONSE_FORMAT and result.detail is not None
