"""
Payload models for the event registration functions.

Domain overview
---------------
EventDetails        — the single event shown by the bot
RegistrationRecord  — the current user's registration for that event
RegisterResult      — payload of `register-for-event`
CancelResult        — payload of `cancel-event-registration`
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import Field

from regbot.models.base import ApiModel

# ─────────────────────────── Constants ────────────────────────────────────────

class RegistrationStatus:
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class ErrorCode:
    # Benign: the user simply has no registration yet
    NOT_REGISTERED = "NOT_REGISTERED"


# ─────────────────────────── Payloads ─────────────────────────────────────────

class EventDetails(ApiModel):
    name: str = Field(alias="eventName")
    title: str
    description: str
    date: str
    registrations_open: bool = Field(alias="registrationsOpen")


class RegistrationRecord(ApiModel):
    status: Optional[str] = None
    meta: Optional[Any] = None                 # opaque, passed through as-is
    checked_in_at: Optional[str] = None       # display-only, kept as sent

    def is_confirmed(self) -> bool:
        return self.status == RegistrationStatus.CONFIRMED

    def is_cancelled(self) -> bool:
        return self.status == RegistrationStatus.CANCELLED

    @property
    def checked_in(self) -> bool:
        return self.checked_in_at is not None


class RegisterResult(ApiModel):
    registration_id: int = Field(alias="registrationId")


class CancelResult(ApiModel):
    cancelled: bool = True
