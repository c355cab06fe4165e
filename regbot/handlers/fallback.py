"""
Global fallback handler — included LAST in the dispatcher.

Catches any callback query that no other router handled:
  - Stale keyboards after bot restart (MemoryStorage is wiped on redeploy)
  - Buttons of a screen the user already left
The event screen is reopened in place.
"""
from aiogram import Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery

from regbot.handlers.screen_flow import open_screen
from regbot.services.api_client import EventApi
from regbot.services.screen_registry import ScreenRegistry
from regbot.services.screens import Screen

router = Router(name="fallback")


@router.callback_query()
async def cq_fallback(
    callback: CallbackQuery,
    state: FSMContext,
    api: EventApi,
    screens: ScreenRegistry,
) -> None:
    await callback.answer("⚠️ This button is out of date. Reopening the event.", show_alert=True)
    if callback.message is None:
        return
    await open_screen(callback.message, callback.from_user.id, Screen.DETAILS, api, screens, state)
