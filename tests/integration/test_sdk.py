"""
Integration tests for the Haumea Python SDK — tests against a real Haumea backend.

Requires environment variables:
  HAUMEA_API_KEY    — valid API key
  HAUMEA_APP_ID     — registered application id
  HAUMEA_PLATFORM   — (optional) android | ios, defaults to android
  HAUMEA_BASE_URL   — (optional) defaults to https://api.haumealabs.com

Run: HAUMEA_INTEGRATION=1 pytest tests/integration/ -v
"""

import asyncio
import os

import pytest

from haumea import AsyncHaumeaClient, AuthenticationError
from haumea.transport.http import DEFAULT_BASE_URL

SKIP = not os.environ.get("HAUMEA_INTEGRATION")
API_KEY = os.environ.get("HAUMEA_API_KEY", "")
APP_ID = os.environ.get("HAUMEA_APP_ID", "")
PLATFORM = os.environ.get("HAUMEA_PLATFORM", "android")
BASE_URL = os.environ.get("HAUMEA_BASE_URL", DEFAULT_BASE_URL)

pytestmark = pytest.mark.skipif(SKIP, reason="HAUMEA_INTEGRATION not set")


def make_client(api_key: str = API_KEY) -> AsyncHaumeaClient:
    return AsyncHaumeaClient(api_key=api_key, app_id=APP_ID, platform=PLATFORM, base_url=BASE_URL)


class TestRemoteConfig:
    @pytest.mark.asyncio
    async def test_fetch_config(self):
        client = make_client()
        result = await client.fetch_config()
        assert result.ok, result.error
        assert client.config == result.flags
        await client.close()

    @pytest.mark.asyncio
    async def test_rejects_invalid_key(self):
        client = make_client(api_key="invalid")
        result = await client.fetch_config()
        assert isinstance(result.error, AuthenticationError)
        assert client.config is None
        await client.close()


class TestTelemetry:
    @pytest.mark.asyncio
    async def test_event_and_log_acknowledged(self):
        client = make_client()
        outcomes = []
        await asyncio.gather(
            client.add_event("integration_test", {"sdk": "python"}, on_success=outcomes.append, on_error=outcomes.append),
            client.add_log("debug", "integration test", on_success=outcomes.append, on_error=outcomes.append),
        )
        assert len(outcomes) == 2
        assert all(getattr(o, "success", False) for o in outcomes), outcomes
        await client.close()
