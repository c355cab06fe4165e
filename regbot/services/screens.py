"""
Screen controllers: one state machine per screen, bound to one event.

Controllers know nothing about Telegram: handlers call mount/retry/actions
and render whatever `state` / `view` ends up being.
"""
from __future__ import annotations

import enum
from typing import Optional

from regbot.models import ErrorCode, EventDetails, RegistrationRecord
from regbot.services.api_client import EventApi
from regbot.services.state_machine import Ready, ScreenMachine, ScreenState


class Screen(str, enum.Enum):
    DETAILS = "details"
    REGISTRATION = "registration"


class RegistrationView(str, enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    UNREGISTERED = "unregistered"


class _ScreenController:
    screen: Screen

    def __init__(self, api: EventApi, event_id: int) -> None:
        if event_id <= 0:
            raise ValueError(f"event_id must be positive, got {event_id}")
        self.api = api
        self.event_id = event_id
        self.machine: ScreenMachine

    @property
    def state(self) -> ScreenState:
        return self.machine.state

    @property
    def closed(self) -> bool:
        return self.machine.closed

    async def mount(self) -> ScreenState:
        return await self.machine.load()

    async def retry(self) -> ScreenState:
        return await self.machine.load()

    def close(self) -> None:
        self.machine.close()


class EventDetailsController(_ScreenController):
    screen = Screen.DETAILS

    def __init__(self, api: EventApi, event_id: int) -> None:
        super().__init__(api, event_id)
        self.machine = ScreenMachine(
            lambda: api.fetch_event_details(event_id),
            name=f"details[{event_id}]",
        )

    @property
    def details(self) -> Optional[EventDetails]:
        state = self.state
        return state.payload if isinstance(state, Ready) else None

    def go_to_registration(self) -> Screen:
        """Pure UI transition; issues no call."""
        return Screen.REGISTRATION


class EventRegistrationController(_ScreenController):
    screen = Screen.REGISTRATION

    def __init__(self, api: EventApi, event_id: int) -> None:
        super().__init__(api, event_id)
        self.machine = ScreenMachine(
            lambda: api.fetch_registration(event_id),
            name=f"registration[{event_id}]",
            benign_codes={ErrorCode.NOT_REGISTERED},
        )

    @property
    def registration(self) -> Optional[RegistrationRecord]:
        state = self.state
        return state.payload if isinstance(state, Ready) else None

    @property
    def view(self) -> Optional[RegistrationView]:
        """Sub-view of the Ready state; None while not Ready."""
        if not isinstance(self.state, Ready):
            return None
        record = self.registration
        if record is not None and record.is_confirmed():
            return RegistrationView.CONFIRMED
        if record is not None and record.is_cancelled():
            return RegistrationView.CANCELLED
        return RegistrationView.UNREGISTERED

    async def register(self) -> bool:
        return await self.machine.act(lambda: self.api.register(self.event_id))

    async def cancel(self) -> bool:
        return await self.machine.act(lambda: self.api.cancel_registration(self.event_id))

    def go_to_details(self) -> Screen:
        return Screen.DETAILS
