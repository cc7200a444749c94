"""
REST HTTP transport for the Haumea API.

Returns raw httpx responses; mapping status codes to errors is the client's job.
"""

from typing import Any, Optional

import httpx

from haumea.version import __version__

DEFAULT_BASE_URL = "https://api.haumealabs.com"
USER_AGENT = f"haumea-python-sdk/{__version__}"


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            transport=transport,
            follow_redirects=True,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    async def get(self, path: str, headers: Optional[dict[str, str]] = None) -> httpx.Response:
        return await self._client.get(path, headers=headers)

    async def post(
        self, path: str, body: Optional[dict[str, Any]] = None, headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        return await self._client.post(path, json=body, headers=headers)

    async def close(self) -> None:
        await self._client.aclose()
