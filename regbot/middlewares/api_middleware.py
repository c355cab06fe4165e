"""
API handle middleware.
Injects an EventApi bound to the user's access token into every handler's data dict under key "api".
"""
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.fsm.context import FSMContext
from aiogram.types import TelegramObject

from regbot.services.api_client import EventApi, SupabaseFunctions

# FSM data key holding the Supabase access token of the signed-in user
ACCESS_TOKEN_KEY = "access_token"


class ApiMiddleware(BaseMiddleware):
    def __init__(self, functions: SupabaseFunctions) -> None:
        self._functions = functions

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        token = None
        state: FSMContext | None = data.get("state")
        if state is not None:
            token = (await state.get_data()).get(ACCESS_TOKEN_KEY)
        data["api"] = EventApi(self._functions, token)
        return await handler(event, data)
