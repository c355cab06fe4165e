"""
Text + keyboard for every screen state.

Rendering is a pure function of controller state so it can be tested
without a bot. Server-provided strings are HTML-escaped.
"""
from __future__ import annotations

from datetime import datetime
from typing import Tuple

from aiogram import html
from aiogram.types import InlineKeyboardMarkup

from regbot.keyboards import details_kb, login_kb, registration_kb, retry_kb
from regbot.services.screens import (
    EventDetailsController,
    EventRegistrationController,
    RegistrationView,
    Screen,
)
from regbot.services.state_machine import Failed, Loading, Unauthorized

Rendered = Tuple[str, InlineKeyboardMarkup | None]

LOADING_TEXT = "⏳ Loading…"
LOGIN_TEXT = (
    "🔐 <b>Please log in to continue</b>\n\n"
    "Sign in with the button below, then send\n"
    "<code>/login &lt;access_token&gt;</code>\n"
    "and tap <i>Retry</i>."
)


def format_timestamp(raw: str) -> str:
    """`YYYY-MM-DD HH:MM` when the value parses as ISO 8601, otherwise the raw text."""
    try:
        return f"{datetime.fromisoformat(raw):%Y-%m-%d %H:%M}"
    except ValueError:
        return html.quote(raw)


def _common(state, screen: Screen, sign_in_url: str) -> Rendered | None:
    if isinstance(state, Loading):
        return LOADING_TEXT, None
    if isinstance(state, Unauthorized):
        return LOGIN_TEXT, login_kb(screen, sign_in_url)
    if isinstance(state, Failed):
        return f"⚠️ {html.quote(state.message)}", retry_kb(screen)
    return None


def render_details(ctrl: EventDetailsController, sign_in_url: str) -> Rendered:
    rendered = _common(ctrl.state, Screen.DETAILS, sign_in_url)
    if rendered is not None:
        return rendered

    d = ctrl.details
    if d is None:
        # Ready(None) cannot come from the details call; shown like the original
        return "⚠️ Unexpected state", retry_kb(Screen.DETAILS)

    reg_line = "🟢 Registrations open" if d.registrations_open else "🔴 Registrations closed"
    text = (
        f"{html.bold(html.quote(d.title))}\n"
        f"🎟 {html.quote(d.name)}\n"
        f"📅 {html.quote(d.date)}\n\n"
        f"{html.quote(d.description)}\n\n"
        f"{reg_line}"
    )
    return text, details_kb()


def render_registration(ctrl: EventRegistrationController, sign_in_url: str) -> Rendered:
    rendered = _common(ctrl.state, Screen.REGISTRATION, sign_in_url)
    if rendered is not None:
        return rendered

    view = ctrl.view
    if view is RegistrationView.CONFIRMED:
        text = "🎉 <b>You're going!</b>"
        record = ctrl.registration
        if record is not None and record.checked_in_at is not None:
            text += f"\n✅ Checked in at {format_timestamp(record.checked_in_at)}"
    elif view is RegistrationView.CANCELLED:
        text = "🚫 <b>Registration cancelled.</b>"
    else:
        text = "📋 You're not registered yet."
    return text, registration_kb(view)


def render(ctrl, sign_in_url: str) -> Rendered:
    if isinstance(ctrl, EventRegistrationController):
        return render_registration(ctrl, sign_in_url)
    return render_details(ctrl, sign_in_url)


def render_loading() -> Rendered:
    return LOADING_TEXT, None


