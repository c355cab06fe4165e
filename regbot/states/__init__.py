from regbot.states.screen_states import ScreenStates

__all__ = ["ScreenStates"]
