"""
Screen state machine.

A screen is always in exactly one of four states:

    Loading  →  Unauthorized | Failed(message) | Ready(payload)

Transitions happen only through `reduce()`; `ScreenMachine` feeds it the
outcomes of real calls and enforces a single call in flight per screen.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, FrozenSet, Generic, Iterable, Optional, TypeVar, Union

from regbot.models import Envelope
from regbot.services.api_client import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")

NO_DATA_MESSAGE = "No data returned"
UNKNOWN_ERROR_MESSAGE = "Unknown error"


# ── States ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Unauthorized:
    pass


@dataclass(frozen=True)
class Failed:
    message: str


@dataclass(frozen=True)
class Ready(Generic[T]):
    payload: Optional[T]


ScreenState = Union[Loading, Unauthorized, Failed, Ready]


# ── Events ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LoadRequested:
    pass


@dataclass(frozen=True)
class FetchResolved:
    envelope: Envelope


@dataclass(frozen=True)
class FetchFailed:
    error: ApiError


@dataclass(frozen=True)
class ActionResolved:
    envelope: Envelope


@dataclass(frozen=True)
class ActionFailed:
    error: ApiError


ScreenEvent = Union[LoadRequested, FetchResolved, FetchFailed, ActionResolved, ActionFailed]


def _failure(error: ApiError) -> ScreenState:
    if error.is_unauthorized:
        return Unauthorized()
    return Failed(error.message or error.__class__.__name__)


def reduce(
    state: ScreenState,
    event: ScreenEvent,
    benign_codes: FrozenSet[str] = frozenset(),
) -> ScreenState:
    """
    Return the next state. Outcomes that arrive in a state which did not
    request them (stale fetch results, actions outside Ready) leave the
    state unchanged.
    """
    if isinstance(event, LoadRequested):
        return Loading()

    if isinstance(event, (FetchResolved, FetchFailed)):
        if not isinstance(state, Loading):
            return state
        if isinstance(event, FetchFailed):
            return _failure(event.error)
        env = event.envelope
        if env.error is not None:
            if env.error.code is not None and env.error.code in benign_codes:
                return Ready(None)
            return Failed(env.error.message or UNKNOWN_ERROR_MESSAGE)
        if env.data is None:
            return Failed(NO_DATA_MESSAGE)
        return Ready(env.data)

    if isinstance(event, (ActionResolved, ActionFailed)):
        if not isinstance(state, Ready):
            return state
        if isinstance(event, ActionFailed):
            return _failure(event.error)
        env = event.envelope
        if env.error is not None:
            return Failed(env.error.message or UNKNOWN_ERROR_MESSAGE)
        if env.data is None:
            return Failed(NO_DATA_MESSAGE)
        # Success always forces a refresh
        return Loading()

    raise TypeError(f"Unknown screen event: {event!r}")


# ── Runner ────────────────────────────────────────────────────────────────────

class ScreenMachine(Generic[T]):
    """
    Owns one screen's state and its in-flight call.

    Parameters
    ----------
    fetch        : zero-arg coroutine factory issuing the screen's read call
    name         : label used in logs
    benign_codes : application error codes meaning "valid absence of data"
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[Envelope[T]]],
        *,
        name: str = "screen",
        benign_codes: Iterable[str] = (),
    ) -> None:
        self._fetch = fetch
        self.name = name
        self._benign = frozenset(benign_codes)
        self._state: ScreenState = Loading()
        self._inflight: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def state(self) -> ScreenState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    @property
    def closed(self) -> bool:
        return self._closed

    def _dispatch(self, event: ScreenEvent) -> None:
        old = self._state
        self._state = reduce(old, event, self._benign)
        if old != self._state:
            logger.info(
                "%s: %s -> %s", self.name, type(old).__name__, type(self._state).__name__
            )

    async def _await(self, task: asyncio.Task) -> None:
        try:
            await task
        except asyncio.CancelledError:
            if not self._closed:
                raise
            logger.debug("%s: in-flight call discarded after close", self.name)

    async def _run_fetch(self) -> None:
        try:
            envelope = await self._fetch()
        except ApiError as exc:
            self._dispatch(FetchFailed(exc))
        else:
            self._dispatch(FetchResolved(envelope))

    async def load(self) -> ScreenState:
        """
        Mount / retry: move to Loading and issue exactly one fetch.
        Joins the call already in flight instead of starting a second one.
        """
        if self._closed:
            return self._state
        if not self.busy:
            self._dispatch(LoadRequested())
            self._inflight = asyncio.create_task(self._run_fetch())
        await self._await(self._inflight)
        return self._state

    async def act(self, action: Callable[[], Awaitable[Envelope[Any]]]) -> bool:
        """
        Run a mutating call. Allowed only from Ready with nothing in flight;
        returns False (state untouched) otherwise. Success refreshes once.
        """
        if self._closed or self.busy or not isinstance(self._state, Ready):
            return False

        async def run() -> None:
            try:
                envelope = await action()
            except ApiError as exc:
                self._dispatch(ActionFailed(exc))
                return
            self._dispatch(ActionResolved(envelope))
            if isinstance(self._state, Loading):
                await self._run_fetch()

        self._inflight = asyncio.create_task(run())
        await self._await(self._inflight)
        return True

    def close(self) -> None:
        """Screen unmounted: cancel the in-flight call and ignore later requests."""
        self._closed = True
        if self.busy:
            self._inflight.cancel()
