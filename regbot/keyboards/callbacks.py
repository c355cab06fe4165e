"""
Centralized CallbackData factories.
Telegram limits callback_data to 64 bytes, so prefixes are kept short.
"""
from aiogram.filters.callback_data import CallbackData


class ScreenCb(CallbackData, prefix="scr"):
    screen: str           # details | registration
    action: str           # retry | navigate | register | cancel
