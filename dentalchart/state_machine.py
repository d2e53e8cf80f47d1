from enum import Enum
from typing import FrozenSet


class GestureState(str, Enum):
    IDLE = "IDLE"
    TRACKING = "TRACKING"


class GestureEvent(str, Enum):
    BEGIN = "BEGIN"
    TOUCH = "TOUCH"
    END = "END"
    CANCEL = "CANCEL"


GESTURE_TRANSITIONS = {
    GestureState.IDLE: {
        GestureEvent.BEGIN: GestureState.TRACKING,
    },
    GestureState.TRACKING: {
        GestureEvent.TOUCH: GestureState.TRACKING,
        GestureEvent.END: GestureState.IDLE,
        GestureEvent.CANCEL: GestureState.IDLE,
    },
}


class InvalidGestureTransitionError(Exception):
    def __init__(self, current_state: GestureState, event: GestureEvent, message: str):
        self.current_state = current_state
        self.event = event
        self.message = message
        super().__init__(message)


def next_state(current_state: GestureState, event: GestureEvent) -> GestureState:
    valid_events = GESTURE_TRANSITIONS.get(current_state, {})
    if event not in valid_events:
        valid_list = ", ".join(f"'{e.value}'" for e in valid_events) if valid_events else "none"
        raise InvalidGestureTransitionError(
            current_state,
            event,
            f"Cannot apply '{event.value}' to a gesture in '{current_state.value}' state. "
            f"Valid events from '{current_state.value}': {valid_list}."
        )
    return valid_events[event]


def can_apply(current_state: GestureState, event: GestureEvent) -> bool:
    return event in GESTURE_TRANSITIONS.get(current_state, {})


def get_valid_events(current_state: GestureState) -> FrozenSet[GestureEvent]:
    return frozenset(GESTURE_TRANSITIONS.get(current_state, {}))
