"""
Scenario tests — Register / Cancel button handlers (handlers/registration.py).

Callbacks are AsyncMock stand-ins for aiogram's CallbackQuery; the screen
itself runs against FakeEventApi.
"""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

from regbot.handlers.registration import cq_cancel, cq_register
from regbot.services.screen_registry import ScreenRegistry
from regbot.services.screens import RegistrationView, Screen
from tests.conftest import (
    EVENT_ID,
    error_envelope,
    register_ok,
    registration_envelope,
)

USER_ID = 7
STALE = "⚠️ This button is out of date."


def _callback() -> AsyncMock:
    callback = AsyncMock()
    callback.from_user.id = USER_ID
    return callback


async def _mounted(fake_api, *fetches) -> ScreenRegistry:
    fake_api.queue("fetch_registration", *fetches)
    screens = ScreenRegistry(EVENT_ID)
    await screens.open(USER_ID, Screen.REGISTRATION, fake_api).mount()
    return screens


class TestStaleButtons:
    async def test_no_screen_open(self, fake_api) -> None:
        callback = _callback()
        await cq_register(callback, ScreenRegistry(EVENT_ID))

        callback.answer.assert_awaited_once_with(STALE, show_alert=True)
        callback.message.edit_text.assert_not_awaited()
        assert fake_api.count("register") == 0

    async def test_cancel_pressed_while_unregistered(self, fake_api) -> None:
        screens = await _mounted(fake_api, error_envelope("nr", "NOT_REGISTERED"))
        callback = _callback()

        await cq_cancel(callback, screens)

        callback.answer.assert_awaited_once_with(STALE, show_alert=True)
        assert fake_api.count("cancel_registration") == 0

    async def test_register_pressed_after_screen_closed(self, fake_api) -> None:
        screens = await _mounted(fake_api, error_envelope("nr", "NOT_REGISTERED"))
        screens.reset(USER_ID)
        callback = _callback()

        await cq_register(callback, screens)

        callback.answer.assert_awaited_once_with(STALE, show_alert=True)
        assert fake_api.count("register") == 0


class TestRegisterButton:
    async def test_register_refreshes_and_redraws(self, fake_api) -> None:
        screens = await _mounted(
            fake_api,
            error_envelope("nr", "NOT_REGISTERED"),
            registration_envelope("CONFIRMED"),
        )
        fake_api.queue("register", register_ok())
        callback = _callback()

        await cq_register(callback, screens)

        callback.answer.assert_awaited_once_with()
        assert fake_api.count("register") == 1
        assert fake_api.count("fetch_registration") == 2
        assert screens.get(USER_ID, Screen.REGISTRATION).view is RegistrationView.CONFIRMED
        text = callback.message.edit_text.await_args.args[0]
        assert "You're going!" in text

    async def test_second_press_while_in_flight_asks_to_wait(self, fake_api) -> None:
        screens = await _mounted(
            fake_api,
            error_envelope("nr", "NOT_REGISTERED"),
            registration_envelope("CONFIRMED"),
        )
        fake_api.queue("register", register_ok())
        release = fake_api.gate("register")
        first = _callback()
        pending = asyncio.create_task(cq_register(first, screens))
        await asyncio.sleep(0)

        second = _callback()
        await cq_register(second, screens)

        second.answer.assert_awaited_once_with("⏳ Please wait…")
        second.message.edit_text.assert_not_awaited()

        release.set()
        await pending
        assert fake_api.count("register") == 1
