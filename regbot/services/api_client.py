"""
Supabase Edge Functions client for the event registration backend.

Two layers:
  SupabaseFunctions: one HTTP handle per process (base URL + publishable key)
  EventApi:          typed facade over the four functions, bound to a user token

Each call is a single request/response round trip; nothing is retried here.
Transport-level failures raise an ApiError subclass, application-level
failures come back inside the Envelope.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import ValidationError

from regbot.models import (
    CancelResult,
    Envelope,
    EventDetails,
    RegisterResult,
    RegistrationRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Function names as deployed on the backend
FN_EVENT_DETAILS = "event-details"
FN_REGISTER = "register-for-event"
FN_REGISTRATION_DETAILS = "event-registration-details"
FN_CANCEL_REGISTRATION = "cancel-event-registration"


# ── Transport errors ──────────────────────────────────────────────────────────

class ApiError(Exception):
    """Base class for failures where no usable envelope was received."""

    is_unauthorized = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportError(ApiError):
    """Network unreachable, timeout or protocol failure."""


class UnauthorizedError(ApiError):
    is_unauthorized = True


class NotFoundError(ApiError):
    pass


class HttpStatusError(ApiError):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResponseFormatError(ApiError):
    """Body is not JSON or does not match the expected envelope."""


# ── HTTP handle ───────────────────────────────────────────────────────────────

class SupabaseFunctions:
    """
    Invokes edge functions at `{base_url}/functions/v1/{name}`.

    Constructed once at process start and passed down to handlers.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        kwargs: dict[str, Any] = {"base_url": f"{self._base_url}/functions/v1"}
        if timeout is not None:
            kwargs["timeout"] = httpx.Timeout(timeout)
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> SupabaseFunctions:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def invoke(
        self,
        name: str,
        body: dict,
        access_token: Optional[str] = None,
    ) -> httpx.Response:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {access_token or self._api_key}",
        }
        logger.debug("POST %s %s (user token: %s)", name, body, bool(access_token))
        try:
            resp = await self._client.post(f"/{name}", json=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Function %s unreachable: %s", name, exc)
            raise TransportError(str(exc) or exc.__class__.__name__) from exc

        if resp.status_code == 401:
            raise UnauthorizedError(f"{name}: unauthorized")
        if resp.status_code == 404:
            raise NotFoundError(f"{name}: not found")
        return resp


def _parse_envelope(resp: httpx.Response, payload: Type[T], name: str) -> Envelope[T]:
    """
    Decode a function response into Envelope[payload].

    Non-2xx responses are accepted only when they carry an application error
    in envelope form; anything else is a transport failure.
    """
    try:
        raw = resp.json()
    except ValueError as exc:
        if resp.is_success:
            raise ResponseFormatError(f"{name}: response is not JSON") from exc
        raise HttpStatusError(resp.status_code, f"{name}: HTTP {resp.status_code}") from exc

    try:
        envelope = Envelope[payload].model_validate(raw)  # type: ignore[valid-type]
    except ValidationError as exc:
        if resp.is_success:
            logger.warning("Function %s returned a malformed envelope: %s", name, exc)
            raise ResponseFormatError(f"{name}: malformed response") from exc
        raise HttpStatusError(resp.status_code, f"{name}: HTTP {resp.status_code}") from exc

    if not resp.is_success and envelope.error is None:
        raise HttpStatusError(resp.status_code, f"{name}: HTTP {resp.status_code}")
    return envelope


# ── Typed facade ──────────────────────────────────────────────────────────────

class EventApi:
    """The four registration calls, optionally on behalf of a signed-in user."""

    def __init__(self, functions: SupabaseFunctions, access_token: Optional[str] = None) -> None:
        self._functions = functions
        self.access_token = access_token

    def with_token(self, access_token: Optional[str]) -> EventApi:
        return EventApi(self._functions, access_token)

    async def _call(self, name: str, event_id: int, payload: Type[T]) -> Envelope[T]:
        if isinstance(event_id, bool) or not isinstance(event_id, int) or event_id <= 0:
            raise ValueError(f"event_id must be a positive integer, got {event_id!r}")
        resp = await self._functions.invoke(name, {"eventId": event_id}, self.access_token)
        return _parse_envelope(resp, payload, name)

    async def fetch_event_details(self, event_id: int) -> Envelope[EventDetails]:
        return await self._call(FN_EVENT_DETAILS, event_id, EventDetails)

    async def register(self, event_id: int) -> Envelope[RegisterResult]:
        return await self._call(FN_REGISTER, event_id, RegisterResult)

    async def fetch_registration(self, event_id: int) -> Envelope[RegistrationRecord]:
        return await self._call(FN_REGISTRATION_DETAILS, event_id, RegistrationRecord)

    async def cancel_registration(self, event_id: int) -> Envelope[CancelResult]:
        return await self._call(FN_CANCEL_REGISTRATION, event_id, CancelResult)
