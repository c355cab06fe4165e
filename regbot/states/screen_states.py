from aiogram.fsm.state import State, StatesGroup


class ScreenStates(StatesGroup):
    """Which screen the user is looking at; buttons are only honoured on their own screen."""
    event_details      = State()
    event_registration = State()
