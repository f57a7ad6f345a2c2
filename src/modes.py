"""Mode controller: actions and the explicit (mode, action) transition table.

A pair missing from TRANSITIONS is not a legal transition; the dispatcher
treats it as an ignored key. QUIT maps to None, meaning the loop ends.
"""
from enum import Enum
from typing import Dict, Optional, Tuple
from models import Mode


class Action(Enum):
    QUIT = "quit"
    BEGIN_EDIT = "begin-edit"
    COMMIT = "commit"
    CANCEL = "cancel"
    EDIT = "edit"
    NAV_NEXT = "next"
    NAV_PREV = "previous"
    NAV_FIRST = "first"
    NAV_LAST = "last"
    TOGGLE = "toggle"
    DELETE = "delete"


TRANSITIONS: Dict[Tuple[Mode, Action], Optional[Mode]] = {
    (Mode.NORMAL, Action.QUIT): None,
    (Mode.NORMAL, Action.BEGIN_EDIT): Mode.INSERT,
    (Mode.NORMAL, Action.NAV_NEXT): Mode.NORMAL,
    (Mode.NORMAL, Action.NAV_PREV): Mode.NORMAL,
    (Mode.NORMAL, Action.NAV_FIRST): Mode.NORMAL,
    (Mode.NORMAL, Action.NAV_LAST): Mode.NORMAL,
    (Mode.NORMAL, Action.TOGGLE): Mode.NORMAL,
    (Mode.NORMAL, Action.DELETE): Mode.NORMAL,
    (Mode.INSERT, Action.COMMIT): Mode.NORMAL,
    (Mode.INSERT, Action.CANCEL): Mode.NORMAL,
    (Mode.INSERT, Action.EDIT): Mode.INSERT,
}


class InvalidTransition(KeyError):
    """Raised when an action has no transition from the given mode."""


def is_allowed(mode: Mode, action: Action) -> bool:
    return (mode, action) in TRANSITIONS


def next_mode(mode: Mode, action: Action) -> Optional[Mode]:
    try:
        return TRANSITIONS[(mode, action)]
    except KeyError:
        raise InvalidTransition(f'{action.value} is not valid in {mode.value} mode') from None
