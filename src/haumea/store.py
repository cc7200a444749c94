"""
ConfigStore — the last successfully fetched remote config, observable.

Holds a single current value: a flags dict, or None while unknown (never
fetched, or the last fetch failed). New observers get the current value
immediately, then changes.

Delivery to each observer is serialized and always hands over the value that
is current at delivery time, so the last value an observer sees equals get()
once mutations stop. A mutation that lands while an observer is still busy is
picked up by the delivering thread; intermediate values may be skipped.
"""

import asyncio
import logging
import threading
from typing import AsyncGenerator, Callable, Mapping, Optional

logger = logging.getLogger(__name__)

ConfigObserver = Callable[[Optional[dict[str, str]]], None]


class _Subscription:
    __slots__ = ("observer", "delivered", "busy", "active")

    def __init__(self, observer: ConfigObserver) -> None:
        self.observer = observer
        self.delivered = -1
        self.busy = False
        self.active = True


class ConfigStore:
    def __init__(self) -> None:
        self._value: Optional[dict[str, str]] = None
        self._version = 0
        self._subscriptions: list[_Subscription] = []
        self._lock = threading.Lock()

    def get(self) -> Optional[dict[str, str]]:
        value = self._value
        return dict(value) if value is not None else None

    def set(self, flags: Mapping[str, str]) -> None:
        self._replace(dict(flags))

    def clear(self) -> None:
        self._replace(None)

    def _replace(self, value: Optional[dict[str, str]]) -> None:
        with self._lock:
            self._value = value
            self._version += 1
            subscriptions = list(self._subscriptions)
        for sub in subscriptions:
            self._deliver(sub)

    def subscribe(self, observer: ConfigObserver) -> Callable[[], None]:
        """Register an observer. Returns a function that unsubscribes it."""
        sub = _Subscription(observer)
        with self._lock:
            self._subscriptions.append(sub)
        self._deliver(sub)

        def remove() -> None:
            with self._lock:
                sub.active = False
                try:
                    self._subscriptions.remove(sub)
                except ValueError:
                    pass
        return remove

    async def updates(self) -> AsyncGenerator[Optional[dict[str, str]], None]:
        """Async stream of config values, starting with the current one.

        The observer stays registered until the generator is closed. Consumers
        that stop early should close it explicitly, e.g. with
        ``contextlib.aclosing(store.updates())`` or ``await stream.aclose()``;
        otherwise values keep queueing until it is garbage-collected.
        """
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[Optional[dict[str, str]]] = asyncio.Queue()

        def _enqueue(value: Optional[dict[str, str]]) -> None:
            loop.call_soon_threadsafe(queue.put_nowait, value)

        remove = self.subscribe(_enqueue)
        try:
            while True:
                yield await queue.get()
        finally:
            remove()

    def _deliver(self, sub: _Subscription) -> None:
        # Whoever holds sub.busy keeps delivering until the observer has seen
        # the current version; other threads just leave it to them.
        with self._lock:
            if sub.busy:
                return
            sub.busy = True
        try:
            while True:
                with self._lock:
                    if not sub.active or sub.delivered == self._version:
                        sub.busy = False
                        return
                    sub.delivered = self._version
                    value = self._value
                self._notify(sub.observer, value)
        except BaseException:
            with self._lock:
                sub.busy = False
            raise

    @staticmethod
    def _notify(observer: ConfigObserver, value: Optional[dict[str, str]]) -> None:
        try:
            observer(dict(value) if value is not None else None)
        except Exception:
            logger.exception("Config observer %r raised", observer)
