"""
Client identity — who is calling the Haumea API.
"""

import random
import string

from pydantic import BaseModel, ConfigDict, Field

from haumea.platform import Platform

USER_ID_ALPHABET = string.ascii_letters + string.digits
USER_ID_LENGTH = 16


def generate_user_id(length: int = USER_ID_LENGTH) -> str:
    """Random anonymous user identifier.

    Uses the non-cryptographic ``random`` module. This is a correlation id for
    telemetry, not a secret; never use it for authentication.
    """
    return "".join(random.choices(USER_ID_ALPHABET, k=length))


class ClientIdentity(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    api_key: str = Field(min_length=1, frozen=True)
    app_id: str = Field(min_length=1, frozen=True)
    platform: Platform = Field(frozen=True)
    user_id: str = Field(default_factory=generate_user_id, min_length=1)

    def headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "app-id": self.app_id,
            "platform": self.platform.value,
        }

    def user_headers(self) -> dict[str, str]:
        return {**self.headers(), "userid": self.user_id}
