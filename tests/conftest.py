"""Shared fixtures: clients wired to an in-process httpx transport."""

import json
from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio

from haumea import AsyncHaumeaClient, HaumeaClient

API_KEY = "hml_test_key"
APP_ID = "com.haumealabs.test"
BASE_URL = "https://haumea.test"


class Recorder:
    """Records requests and answers them with a swappable handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], Any] = lambda request: httpx.Response(200, json={})

    def respond(self, status: int = 200, payload: Any = None, text: str = "") -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            if payload is not None:
                return httpx.Response(status, json=payload)
            return httpx.Response(status, text=text)
        self.handler = _handler

    def fail(self, exc_type: type = httpx.ConnectError, message: str = "connection refused") -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            raise exc_type(message, request=request)
        self.handler = _handler

    def __call__(self, request: httpx.Request) -> Any:
        self.requests.append(request)
        return self.handler(request)

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


def make_async_client(recorder: Recorder, **kwargs: Any) -> AsyncHaumeaClient:
    kwargs.setdefault("platform", "android")
    return AsyncHaumeaClient(
        api_key=API_KEY,
        app_id=APP_ID,
        base_url=BASE_URL,
        transport=httpx.MockTransport(recorder),
        **kwargs,
    )


def make_sync_client(recorder: Recorder, **kwargs: Any) -> HaumeaClient:
    kwargs.setdefault("platform", "ios")
    return HaumeaClient(
        api_key=API_KEY,
        app_id=APP_ID,
        base_url=BASE_URL,
        transport=httpx.MockTransport(recorder),
        **kwargs,
    )


@pytest_asyncio.fixture
async def client(recorder: Recorder):
    c = make_async_client(recorder)
    yield c
    await c.close()


@pytest.fixture
def sync_client(recorder: Recorder):
    c = make_sync_client(recorder)
    yield c
    c.close()
