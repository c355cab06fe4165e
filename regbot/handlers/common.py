"""
Common handlers: /start, /login, /logout.
"""
import logging

from aiogram import Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from regbot.handlers.screen_flow import open_screen
from regbot.middlewares import ACCESS_TOKEN_KEY
from regbot.services.api_client import EventApi
from regbot.services.screen_registry import ScreenRegistry
from regbot.services.screens import Screen
from regbot.views import LOADING_TEXT

logger = logging.getLogger(__name__)
router = Router(name="common")


# ── /start ────────────────────────────────────────────────────────────────────

@router.message(CommandStart())
async def cmd_start(
    message: Message,
    state: FSMContext,
    api: EventApi,
    screens: ScreenRegistry,
) -> None:
    screen_msg = await message.answer(LOADING_TEXT)
    await open_screen(screen_msg, message.from_user.id, Screen.DETAILS, api, screens, state)


# ── /login <token> ────────────────────────────────────────────────────────────

@router.message(Command("login"))
async def cmd_login(
    message: Message,
    command: CommandObject,
    state: FSMContext,
    api: EventApi,
    screens: ScreenRegistry,
) -> None:
    token = (command.args or "").strip()
    if not token:
        await message.answer(
            "Usage: <code>/login &lt;access_token&gt;</code>\n"
            "Get the token by signing in from the event screen."
        )
        return

    # The token should not stay visible in the chat history
    try:
        await message.delete()
    except TelegramBadRequest as exc:
        logger.warning("Could not delete /login message: %s", exc)

    await state.update_data(**{ACCESS_TOKEN_KEY: token})
    screens.reset(message.from_user.id)
    logger.info("user %s signed in", message.from_user.id)

    screen_msg = await message.answer(LOADING_TEXT)
    await open_screen(
        screen_msg, message.from_user.id, Screen.DETAILS, api.with_token(token), screens, state
    )


# ── /logout ───────────────────────────────────────────────────────────────────

@router.message(Command("logout"))
async def cmd_logout(message: Message, state: FSMContext, screens: ScreenRegistry) -> None:
    await state.update_data(**{ACCESS_TOKEN_KEY: None})
    await state.set_state(None)
    screens.reset(message.from_user.id)
    logger.info("user %s signed out", message.from_user.id)
    await message.answer("👋 Signed out. Send /start to view the event again.")
