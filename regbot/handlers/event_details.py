"""
Event Details screen.

Flow:
  /start → Loading → Ready (details) | Failed (retry) | Unauthorized (sign in + retry)
  Ready → "Registration and more" → Event Registration screen
"""
import logging

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery

from regbot.handlers.screen_flow import open_screen, retry_screen
from regbot.keyboards import ScreenCb
from regbot.services.api_client import EventApi
from regbot.services.screen_registry import ScreenRegistry
from regbot.services.screens import EventDetailsController, Screen
from regbot.states import ScreenStates

logger = logging.getLogger(__name__)
router = Router(name="event_details")


@router.callback_query(
    ScreenCb.filter((F.screen == Screen.DETAILS.value) & (F.action == "retry")),
    ScreenStates.event_details,
)
async def cq_details_retry(
    callback: CallbackQuery,
    api: EventApi,
    screens: ScreenRegistry,
) -> None:
    await callback.answer()
    ctrl = screens.current(callback.from_user.id, Screen.DETAILS, api)
    await retry_screen(callback.message, ctrl)


@router.callback_query(
    ScreenCb.filter((F.screen == Screen.DETAILS.value) & (F.action == "navigate")),
    ScreenStates.event_details,
)
async def cq_go_to_registration(
    callback: CallbackQuery,
    state: FSMContext,
    api: EventApi,
    screens: ScreenRegistry,
) -> None:
    ctrl = screens.get(callback.from_user.id, Screen.DETAILS)
    target = ctrl.go_to_registration() if isinstance(ctrl, EventDetailsController) else Screen.REGISTRATION
    await callback.answer()
    await open_screen(callback.message, callback.from_user.id, target, api, screens, state)
