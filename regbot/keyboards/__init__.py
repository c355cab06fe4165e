from regbot.keyboards.callbacks import ScreenCb
from regbot.keyboards.screens_kb import retry_kb, login_kb, details_kb, registration_kb

__all__ = [
    # callbacks
    "ScreenCb",
    # screens
    "retry_kb", "login_kb", "details_kb", "registration_kb",
]
