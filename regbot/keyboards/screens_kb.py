"""
Inline keyboards for the event screens, one builder per rendered state.
"""
from typing import Optional

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from regbot.keyboards.callbacks import ScreenCb
from regbot.services.screens import RegistrationView, Screen


def _button(text: str, screen: Screen, action: str) -> InlineKeyboardButton:
    return InlineKeyboardButton(
        text=text, callback_data=ScreenCb(screen=screen.value, action=action).pack()
    )


def retry_kb(screen: Screen) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(_button("🔄 Retry", screen, "retry"))
    return builder.as_markup()


def login_kb(screen: Screen, sign_in_url: str) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(text="🔑 Sign in", url=sign_in_url))
    builder.row(_button("🔄 Retry loading event", screen, "retry"))
    return builder.as_markup()


def details_kb() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(_button("📝 Registration and more", Screen.DETAILS, "navigate"))
    return builder.as_markup()


def registration_kb(view: Optional[RegistrationView]) -> InlineKeyboardMarkup:
    """Offer register from UNREGISTERED and cancel from CONFIRMED; always a way back."""
    builder = InlineKeyboardBuilder()
    if view is RegistrationView.CONFIRMED:
        builder.row(_button("🚫 Cancel", Screen.REGISTRATION, "cancel"))
    elif view is RegistrationView.UNREGISTERED:
        builder.row(_button("✅ Click to register", Screen.REGISTRATION, "register"))
    builder.row(_button("🔙 Event details", Screen.REGISTRATION, "navigate"))
    return builder.as_markup()
