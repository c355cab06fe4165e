"""
Shared pytest fixtures for the event registration bot tests.

Sets required environment variables BEFORE any regbot module is imported so
that pydantic-settings initialisation uses safe test values.
"""
from __future__ import annotations

import asyncio
import os
from collections import defaultdict, deque
from typing import Any, Callable, Deque, Dict, Optional

# ── Set env vars before any regbot import ─────────────────────────────────────
os.environ.setdefault("BOT_TOKEN", "123456:test-token-for-pytest")
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "sb_publishable_test")

# ── Third-party ───────────────────────────────────────────────────────────────
import httpx
import pytest

# ── regbot imports (safe after env vars are set) ──────────────────────────────
from regbot.models import (
    CancelResult,
    Envelope,
    EventDetails,
    GenericError,
    RegisterResult,
    RegistrationRecord,
)
from regbot.services.api_client import SupabaseFunctions

EVENT_ID = 1


# ── HTTP fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
async def make_functions():
    """
    Factory fixture — builds a SupabaseFunctions handle whose requests are
    answered by `handler(request) -> httpx.Response` (httpx.MockTransport).
    """
    created: list[SupabaseFunctions] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> SupabaseFunctions:
        fn = SupabaseFunctions(
            "https://example.supabase.co/",
            "anon-key",
            transport=httpx.MockTransport(handler),
        )
        created.append(fn)
        return fn

    yield _make
    for fn in created:
        await fn.aclose()


# ── Fake API ──────────────────────────────────────────────────────────────────

def details_envelope(**overrides: Any) -> Envelope[EventDetails]:
    data = {
        "eventName": "DevFest",
        "title": "DevFest 2025",
        "description": "A day of talks",
        "date": "2025-11-29",
        "registrationsOpen": True,
    }
    data.update(overrides)
    return Envelope[EventDetails](data=EventDetails.model_validate(data))


def registration_envelope(status: Optional[str]) -> Envelope[RegistrationRecord]:
    return Envelope[RegistrationRecord](data=RegistrationRecord(status=status))


def error_envelope(message: str, code: Optional[str] = None) -> Envelope:
    return Envelope(error=GenericError(code=code, message=message))


def register_ok() -> Envelope[RegisterResult]:
    return Envelope[RegisterResult](data=RegisterResult(registration_id=42))


def cancel_ok() -> Envelope[CancelResult]:
    return Envelope[CancelResult](data=CancelResult(cancelled=True))


class FakeEventApi:
    """
    In-memory stand-in for EventApi.

    Outcomes are queued per operation; an outcome is an Envelope to return or
    an exception to raise. `gate(op)` holds the next call of `op` in flight
    until the returned event is set.
    """

    def __init__(self) -> None:
        self.outcomes: Dict[str, Deque[Any]] = defaultdict(deque)
        self.calls: list[tuple[str, int]] = []
        self._gates: Dict[str, asyncio.Event] = {}

    def queue(self, op: str, *outcomes: Any) -> FakeEventApi:
        self.outcomes[op].extend(outcomes)
        return self

    def gate(self, op: str) -> asyncio.Event:
        ev = asyncio.Event()
        self._gates[op] = ev
        return ev

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)

    async def _call(self, op: str, event_id: int) -> Any:
        self.calls.append((op, event_id))
        gate = self._gates.pop(op, None)
        if gate is not None:
            await gate.wait()
        outcome = self.outcomes[op].popleft()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def fetch_event_details(self, event_id: int):
        return await self._call("fetch_event_details", event_id)

    async def register(self, event_id: int):
        return await self._call("register", event_id)

    async def fetch_registration(self, event_id: int):
        return await self._call("fetch_registration", event_id)

    async def cancel_registration(self, event_id: int):
        return await self._call("cancel_registration", event_id)


@pytest.fixture
def fake_api() -> FakeEventApi:
    return FakeEventApi()
