"""
Unit tests — Settings (config.py).

Settings are built with explicit keyword values so the environment set up in
conftest.py does not leak into the assertions.
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from regbot.config import Settings

BASE = {
    "BOT_TOKEN": "123:abc",
    "SUPABASE_URL": "https://proj.supabase.co/",
    "SUPABASE_KEY": "anon",
}


def test_defaults() -> None:
    s = Settings(**BASE)
    assert s.EVENT_ID == 1
    assert s.AUTH_PROVIDER == "github"
    assert s.HTTP_TIMEOUT is None
    assert s.SUPABASE_URL == "https://proj.supabase.co"


@pytest.mark.parametrize("event_id", [0, -5])
def test_event_id_must_be_positive(event_id: int) -> None:
    with pytest.raises(ValidationError):
        Settings(**BASE, EVENT_ID=event_id)


def test_sign_in_url_without_redirect() -> None:
    s = Settings(**BASE)
    assert s.sign_in_url == "https://proj.supabase.co/auth/v1/authorize?provider=github"


def test_sign_in_url_with_redirect() -> None:
    s = Settings(**BASE, AUTH_PROVIDER="google", AUTH_REDIRECT_URL="https://t.me/event_bot")
    assert s.sign_in_url == (
        "https://proj.supabase.co/auth/v1/authorize"
        "?provider=google&redirect_to=https%3A%2F%2Ft.me%2Fevent_bot"
    )
