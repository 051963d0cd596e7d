import asyncio
from collections import defaultdict
from collections.abc import Callable
from enum import Enum
import inspect
from typing import Any

from .logger import getLogger

LOGGER = getLogger("events")


class FetcherEvent(Enum):
    ACCESS_TOKEN_REFRESHING = "accessTokenRefreshing"
    ACCESS_TOKEN_REFRESHED = "accessTokenRefreshed"
    ACCESS_TOKEN_REVOKING = "accessTokenRevoking"
    ACCESS_TOKEN_REVOKED = "accessTokenRevoked"
    TOKEN_EXPIRED = "tokenExpired"
    INACTIVE_USER = "inactiveUser"


EventHandler = Callable[..., Any]
Unsubscribe = Callable[[], None]


class EventEmitter:
    """
    Fire-and-forget notifications for a closed set of `FetcherEvent`s.

    A failing handler is logged and never interrupts the emitter or the
    remaining handlers. Coroutine handlers are scheduled on the running loop.
    """

    def __init__(self):
        self._handlers: defaultdict[FetcherEvent, list[EventHandler]] = defaultdict(list)
        self._handler_tasks: set[asyncio.Task] = set()

    def subscribe(self, event: FetcherEvent, handler: EventHandler) -> Unsubscribe:
        if not isinstance(event, FetcherEvent):
            raise TypeError(f"{event!r} is not a FetcherEvent")
        self._handlers[event].append(handler)

        def unsubscribe():
            try:
                self._handlers[event].remove(handler)
            except ValueError:
                pass

        return unsubscribe

    def emit(self, event: FetcherEvent, *args: Any):
        for handler in list(self._handlers[event]):
            try:
                result = handler(*args)
            except Exception:
                LOGGER.exception("Handler for %s failed", event.value)
                continue
            if inspect.iscoroutine(result):
                task = asyncio.ensure_future(result)
                self._handler_tasks.add(task)
                task.add_done_callback(self._handler_done)

    def _handler_done(self, task: asyncio.Task):
        self._handler_tasks.discard(task)
        if not task.cancelled() and (error := task.exception()) is not None:
            LOGGER.error("Async event handler failed", exc_info=error)
