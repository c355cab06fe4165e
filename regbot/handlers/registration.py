"""
Event Registration screen.

Flow:
  Loading → Ready → confirmed   → [Cancel]   → refresh
                  → cancelled
                  → unregistered → [Register] → refresh
  Failed / Unauthorized → [Retry]
"""
import logging

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery

from regbot.handlers.screen_flow import open_screen, retry_screen, show_state
from regbot.keyboards import ScreenCb
from regbot.services.api_client import EventApi
from regbot.services.screen_registry import ScreenRegistry
from regbot.services.screens import EventRegistrationController, RegistrationView, Screen
from regbot.states import ScreenStates

logger = logging.getLogger(__name__)
router = Router(name="registration")

_REGISTRATION = F.screen == Screen.REGISTRATION.value


@router.callback_query(
    ScreenCb.filter(_REGISTRATION & (F.action == "retry")),
    ScreenStates.event_registration,
)
async def cq_registration_retry(
    callback: CallbackQuery,
    api: EventApi,
    screens: ScreenRegistry,
) -> None:
    await callback.answer()
    ctrl = screens.current(callback.from_user.id, Screen.REGISTRATION, api)
    await retry_screen(callback.message, ctrl)


@router.callback_query(
    ScreenCb.filter(_REGISTRATION & (F.action == "navigate")),
    ScreenStates.event_registration,
)
async def cq_back_to_details(
    callback: CallbackQuery,
    state: FSMContext,
    api: EventApi,
    screens: ScreenRegistry,
) -> None:
    await callback.answer()
    await open_screen(callback.message, callback.from_user.id, Screen.DETAILS, api, screens, state)


async def _run_action(
    callback: CallbackQuery,
    screens: ScreenRegistry,
    allowed_from: RegistrationView,
    action: str,
) -> None:
    ctrl = screens.get(callback.from_user.id, Screen.REGISTRATION)
    if not isinstance(ctrl, EventRegistrationController) or ctrl.view is not allowed_from:
        await callback.answer("⚠️ This button is out of date.", show_alert=True)
        return
    if ctrl.machine.busy:
        await callback.answer("⏳ Please wait…")
        return

    await callback.answer()
    if action == "register":
        accepted = await ctrl.register()
    else:
        accepted = await ctrl.cancel()
    logger.info(
        "user %s %s: accepted=%s, now %s",
        callback.from_user.id, action, accepted, type(ctrl.state).__name__,
    )
    await show_state(callback.message, ctrl)


@router.callback_query(
    ScreenCb.filter(_REGISTRATION & (F.action == "register")),
    ScreenStates.event_registration,
)
async def cq_register(callback: CallbackQuery, screens: ScreenRegistry) -> None:
    await _run_action(callback, screens, RegistrationView.UNREGISTERED, "register")


@router.callback_query(
    ScreenCb.filter(_REGISTRATION & (F.action == "cancel")),
    ScreenStates.event_registration,
)
async def cq_cancel(callback: CallbackQuery, screens: ScreenRegistry) -> None:
    await _run_action(callback, screens, RegistrationView.CONFIRMED, "cancel")
