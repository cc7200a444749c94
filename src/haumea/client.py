"""
AsyncHaumeaClient / HaumeaClient — main SDK clients.

The async client is primary. HaumeaClient wraps it for synchronous hosts and
keeps a private event loop running on a background thread so fire-and-forget
telemetry makes progress between calls.
"""

import asyncio
import inspect
import logging
import threading
from typing import Any, Callable, Coroutine, Mapping, Optional, TypeVar, Union

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from haumea.decoder import decode_remote_response, is_malformed
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
from haumea.models.identity import ClientIdentity
from haumea.models.remote_config import ConfigSuccess
from haumea.models.telemetry import AddEventRequest, AddLogRequest, BaseResponse, Severity
from haumea.platform import Platform, resolve_platform
from haumea.store import ConfigStore
from haumea.transport.http import DEFAULT_BASE_URL, HttpClient

logger = logging.getLogger(__name__)

CONFIG_PATH = "/remote-config"
EVENTS_PATH = "/addEvent"
LOGS_PATH = "/addLog"

SEVERITIES = tuple(s.value for s in Severity)

T = TypeVar("T")
SuccessCallback = Callable[[BaseResponse], Any]
ErrorCallback = Callable[[HaumeaError], Any]


class FetchResult:
    """Outcome of one fetch_config call: flags on success, a typed error otherwise."""

    __slots__ = ("flags", "error")

    def __init__(self, flags: Optional[dict[str, str]] = None, error: Optional[HaumeaError] = None):
        self.flags = flags
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> dict[str, str]:
        """Return the flags, or raise the fetch error."""
        if self.error is not None:
            raise self.error
        return dict(self.flags or {})

    def __repr__(self) -> str:
        if self.error is not None:
            return f"FetchResult(error={self.error!r})"
        return f"FetchResult(flags={self.flags!r})"


def error_for_status(response: httpx.Response, identity: ClientIdentity) -> HaumeaError:
    """Map a non-2xx response to its error category."""
    status = response.status_code
    if status == 401:
        return AuthenticationError(status_code=status)
    if status == 404:
        return NotFoundError(
            f"Application not found (app_id: {identity.app_id}, platform: {identity.platform.value})",
            details={"app_id": identity.app_id, "platform": identity.platform.value},
        )
    if status == 400:
        return BadRequestError(f"Bad request: {response.reason_phrase}")
    return ServerError(f"Server error: {response.reason_phrase}", status_code=status)


def _validation_error(e: PydanticValidationError) -> ValidationError:
    errors = e.errors(include_url=False)
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()))
    message = first.get("msg", str(e))
    return ValidationError(f"{field}: {message}" if field else message, details={"errors": errors})


def _acknowledgement(response: httpx.Response) -> BaseResponse:
    try:
        return BaseResponse.model_validate_json(response.content)
    except ValueError:
        return BaseResponse()


class AsyncHaumeaClient:
    """Async Haumea client (primary)."""

    def __init__(
        self,
        api_key: str,
        app_id: str,
        platform: Union[Platform, str, None] = None,
        base_url: str = DEFAULT_BASE_URL,
        user_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        resolved = resolve_platform(platform)
        if resolved is None:
            raise ValidationError(
                "Platform must be either 'android' or 'ios'",
                details={"platform": platform},
            )
        fields: dict[str, Any] = {"api_key": api_key, "app_id": app_id, "platform": resolved}
        if user_id is not None:
            fields["user_id"] = user_id
        try:
            self._identity = ClientIdentity(**fields)
        except PydanticValidationError as e:
            raise _validation_error(e) from None

        self.http = HttpClient(base_url=base_url, transport=transport)
        self.config_store = ConfigStore()

        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def identity(self) -> ClientIdentity:
        return self._identity

    @property
    def platform(self) -> Platform:
        return self._identity.platform

    @property
    def user_id(self) -> str:
        return self._identity.user_id

    @user_id.setter
    def user_id(self, value: str) -> None:
        try:
            self._identity.user_id = value
        except PydanticValidationError as e:
            raise _validation_error(e) from None

    @property
    def config(self) -> Optional[dict[str, str]]:
        """The last fetched flags, or None if unknown."""
        return self.config_store.get()

    @property
    def closed(self) -> bool:
        return self._closed

    async def fetch_config(self) -> FetchResult:
        """Fetch remote config and update config_store.

        Remote and transport failures are returned as FetchResult.error (and
        clear the store); they are never raised.
        """
        self._ensure_open()
        try:
            response = await self.http.get(CONFIG_PATH, headers=self._identity.headers())
        except Exception as e:
            return self._fetch_failed(NetworkError(f"Failed to fetch remote config: {e}"))

        logger.debug("Raw response (%s): %s", response.status_code, response.text[:200])

        if not response.is_success:
            return self._fetch_failed(error_for_status(response, self._identity))

        result = decode_remote_response(response.content)
        if isinstance(result, ConfigSuccess):
            self.config_store.set(result.flags)
            return FetchResult(flags=result.flags)

        if is_malformed(result):
            error: HaumeaError = DecodeError(
                result.reason, details={"detail": result.detail}, status_code=response.status_code,
            )
        else:
            error = ServerError(
                result.reason,
                details={"app_id": result.app_id, "platform": result.platform},
                status_code=response.status_code,
            )
        return self._fetch_failed(error)

    def fetch_config_async(self) -> "asyncio.Task[FetchResult]":
        """Refresh config in the background; the outcome is only logged."""
        self._ensure_open()

        async def _refresh() -> FetchResult:
            result = await self.fetch_config()
            if result.ok:
                logger.info("Successfully updated %d flags", len(result.flags or {}))
            else:
                logger.warning("Failed to fetch config: %s", result.error)
            return result

        return self._spawn(_refresh())

    def add_event(
        self,
        name: str,
        params: Optional[Mapping[str, Any]] = None,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> "asyncio.Task[None]":
        """Report an analytics event (fire-and-forget)."""
        self._ensure_open()
        try:
            request = AddEventRequest(name=name, params=params)
        except PydanticValidationError as e:
            raise _validation_error(e) from None
        return self._dispatch(EVENTS_PATH, request, on_success, on_error)

    def add_log(
        self,
        severity: Union[Severity, str],
        message: str,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> "asyncio.Task[None]":
        """Report a log line (fire-and-forget). Severity must be debug, info, warn or error."""
        self._ensure_open()
        if severity not in SEVERITIES:
            raise ValidationError(
                "Invalid severity level. Must be one of: " + ", ".join(SEVERITIES),
                details={"severity": severity},
            )
        try:
            request = AddLogRequest(severity=severity, message=message)
        except PydanticValidationError as e:
            raise _validation_error(e) from None
        return self._dispatch(LOGS_PATH, request, on_success, on_error)

    async def close(self) -> None:
        """Cancel background tasks and release the transport."""
        if self._closed:
            return
        self._closed = True
        current = asyncio.current_task()
        tasks = [t for t in self._tasks if t is not current]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        await self.http.close()

    async def __aenter__(self) -> "AsyncHaumeaClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _fetch_failed(self, error: HaumeaError) -> FetchResult:
        self.config_store.clear()
        return FetchResult(error=error)

    def _dispatch(
        self,
        path: str,
        request: BaseModel,
        on_success: Optional[SuccessCallback],
        on_error: Optional[ErrorCallback],
    ) -> "asyncio.Task[None]":
        body = request.model_dump(mode="json")
        headers = self._identity.user_headers()

        async def _send() -> None:
            logger.debug("POST %s %s", path, body)
            try:
                response = await self.http.post(path, body=body, headers=headers)
            except Exception as e:
                await self._report_error(path, NetworkError(f"Request to {path} failed: {e}"), on_error)
                return
            if not response.is_success:
                await self._report_error(path, error_for_status(response, self._identity), on_error)
                return
            await self._invoke(on_success, _acknowledgement(response))

        return self._spawn(_send())

    async def _report_error(self, path: str, error: HaumeaError, on_error: Optional[ErrorCallback]) -> None:
        if on_error is None:
            logger.warning("%s failed: %s", path, error)
            return
        await self._invoke(on_error, error)

    async def _invoke(self, callback: Optional[Callable[[Any], Any]], arg: Any) -> None:
        # No callbacks once close() has started
        if callback is None or self._closed:
            return
        try:
            result = callback(arg)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Callback %r raised", callback)

    def _spawn(self, coro: Coroutine[Any, Any, T]) -> "asyncio.Task[T]":
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            raise HaumeaError(
                "no_event_loop",
                "Background dispatch needs a running event loop; use HaumeaClient from synchronous code.",
            ) from None
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError()


class HaumeaClient:
    """Sync wrapper around AsyncHaumeaClient. Runs the event loop on a background thread."""

    def __init__(self, *args: Any, **kwargs: Any):
        self._async = AsyncHaumeaClient(*args, **kwargs)
        self._loop = asyncio.new_event_loop()
        self._closing = False
        self._thread = threading.Thread(target=self._serve, name="haumea-loop", daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        try:
            self._loop.run_forever()
        finally:
            self._loop.close()

    def _run(self, coro: Coroutine[Any, Any, T]) -> T:
        if self._closing:
            coro.close()
            raise ClientClosedError()
        return asyncio.run_coroutine_threadsafe(coro, self._loop).result()

    def _call(self, fn: Callable[..., Any], *args: Any) -> Any:
        # Task spawning must happen on the loop thread
        async def _on_loop() -> Any:
            return fn(*args)
        return self._run(_on_loop())

    @property
    def identity(self) -> ClientIdentity:
        return self._async.identity

    @property
    def platform(self) -> Platform:
        return self._async.platform

    @property
    def user_id(self) -> str:
        return self._async.user_id

    @user_id.setter
    def user_id(self, value: str) -> None:
        self._async.user_id = value

    @property
    def config(self) -> Optional[dict[str, str]]:
        return self._async.config

    @property
    def config_store(self) -> ConfigStore:
        return self._async.config_store

    @property
    def closed(self) -> bool:
        return self._async.closed

    def fetch_config(self) -> FetchResult:
        return self._run(self._async.fetch_config())

    def fetch_config_async(self) -> None:
        self._call(self._async.fetch_config_async)

    def add_event(
        self,
        name: str,
        params: Optional[Mapping[str, Any]] = None,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        """Report an analytics event without waiting for delivery. Callbacks run on the loop thread."""
        self._call(self._async.add_event, name, params, on_success, on_error)

    def add_log(
        self,
        severity: Union[Severity, str],
        message: str,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._call(self._async.add_log, severity, message, on_success, on_error)

    def close(self) -> None:
        """Close the client and stop its loop thread.

        From a callback (i.e. on the loop thread) the shutdown is scheduled and
        completes after the callback returns.
        """
        if self._closing:
            return
        self._closing = True
        if threading.current_thread() is self._thread:
            task = self._loop.create_task(self._async.close())
            task.add_done_callback(lambda _: self._loop.stop())
            return
        try:
            asyncio.run_coroutine_threadsafe(self._async.close(), self._loop).result()
        finally:
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join()

    def __enter__(self) -> "HaumeaClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
