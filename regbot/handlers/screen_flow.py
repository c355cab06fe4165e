"""
Shared helpers for showing screens in a single bot message.

A screen lives in one message that is edited in place after every state
transition. Nothing is written once the screen has been unmounted.
"""
import logging

from aiogram.exceptions import TelegramBadRequest
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State
from aiogram.types import Message

from regbot.config import settings
from regbot.services.api_client import EventApi
from regbot.services.screen_registry import Controller, ScreenRegistry
from regbot.services.screens import Screen
from regbot.states import ScreenStates
from regbot.views import Rendered, render, render_loading

logger = logging.getLogger(__name__)

SCREEN_STATES: dict[Screen, State] = {
    Screen.DETAILS:      ScreenStates.event_details,
    Screen.REGISTRATION: ScreenStates.event_registration,
}


async def show(message: Message, rendered: Rendered) -> None:
    text, kb = rendered
    try:
        await message.edit_text(text, reply_markup=kb)
    except TelegramBadRequest as exc:
        # Re-rendering an unchanged state is harmless
        if "message is not modified" not in str(exc):
            raise


async def show_state(message: Message, ctrl: Controller) -> None:
    if ctrl.closed:
        logger.debug("%s screen closed, result not shown", ctrl.screen.value)
        return
    await show(message, render(ctrl, settings.sign_in_url))


async def open_screen(
    message: Message,
    user_id: int,
    screen: Screen,
    api: EventApi,
    screens: ScreenRegistry,
    state: FSMContext,
) -> Controller:
    """Unmount whatever the user had open, mount `screen` and render its result."""
    ctrl = screens.open(user_id, screen, api)
    await state.set_state(SCREEN_STATES[screen])
    await show(message, render_loading())
    await ctrl.mount()
    await show_state(message, ctrl)
    return ctrl


async def retry_screen(message: Message, ctrl: Controller) -> None:
    await show(message, render_loading())
    await ctrl.retry()
    await show_state(message, ctrl)
