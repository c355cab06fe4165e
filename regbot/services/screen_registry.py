"""
Per-user screen lifetime.

Each Telegram user has at most one live controller per screen. Opening a
screen unmounts the one the user is leaving, which cancels its in-flight call.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Union

from regbot.services.api_client import EventApi
from regbot.services.screens import (
    EventDetailsController,
    EventRegistrationController,
    Screen,
)

logger = logging.getLogger(__name__)

Controller = Union[EventDetailsController, EventRegistrationController]

_CONTROLLERS = {
    Screen.DETAILS: EventDetailsController,
    Screen.REGISTRATION: EventRegistrationController,
}


class ScreenRegistry:
    def __init__(self, event_id: int) -> None:
        self.event_id = event_id
        # user_id → screen → controller
        self._screens: Dict[int, Dict[Screen, Controller]] = {}

    def get(self, user_id: int, screen: Screen) -> Optional[Controller]:
        ctrl = self._screens.get(user_id, {}).get(screen)
        if ctrl is not None and ctrl.closed:
            return None
        return ctrl

    def open(self, user_id: int, screen: Screen, api: EventApi) -> Controller:
        """Mount `screen` fresh for the user, unmounting every other screen."""
        screens = self._screens.setdefault(user_id, {})
        for other in list(screens):
            screens.pop(other).close()
        ctrl = _CONTROLLERS[screen](api, self.event_id)
        screens[screen] = ctrl
        logger.debug("user %s opened %s", user_id, screen.value)
        return ctrl

    def current(self, user_id: int, screen: Screen, api: EventApi) -> Controller:
        """Live controller for `screen`, mounting one if the user has none."""
        return self.get(user_id, screen) or self.open(user_id, screen, api)

    def reset(self, user_id: int) -> None:
        for ctrl in self._screens.pop(user_id, {}).values():
            ctrl.close()

    def close_all(self) -> None:
        for user_id in list(self._screens):
            self.reset(user_id)
