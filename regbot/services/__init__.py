from regbot.services.api_client import (
    SupabaseFunctions, EventApi,
    ApiError, TransportError, UnauthorizedError, NotFoundError,
    HttpStatusError, ResponseFormatError,
)
from regbot.services.state_machine import (
    Loading, Unauthorized, Failed, Ready, ScreenState,
    reduce, ScreenMachine, NO_DATA_MESSAGE,
)
from regbot.services.screens import (
    Screen, RegistrationView,
    EventDetailsController, EventRegistrationController,
)
from regbot.services.screen_registry import ScreenRegistry

__all__ = [
    # api client
    "SupabaseFunctions", "EventApi",
    "ApiError", "TransportError", "UnauthorizedError", "NotFoundError",
    "HttpStatusError", "ResponseFormatError",
    # state machine
    "Loading", "Unauthorized", "Failed", "Ready", "ScreenState",
    "reduce", "ScreenMachine", "NO_DATA_MESSAGE",
    # controllers
    "Screen", "RegistrationView",
    "EventDetailsController", "EventRegistrationController",
    "ScreenRegistry",
]
