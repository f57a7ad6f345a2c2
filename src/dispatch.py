"""Input dispatcher: maps a key plus the current mode to an action and applies it.

This is the only place application state is mutated. Every mutation of the
todo list is followed by a synchronous persist before handle_key returns;
a persist failure propagates to the caller instead of being swallowed.
"""
from dataclasses import InitVar, dataclass, field
from typing import Dict, Optional

from entry import EntryBuffer
from logging_setup import get_logger
from models import Mode, Task
from modes import Action, is_allowed, next_mode
from selection import Selection
from storage import Storage
from todo_list import TodoList

logger = get_logger(__name__)

NORMAL_KEYS: Dict[str, Action] = {
    'q': Action.QUIT,
    'ctrl+c': Action.QUIT,
    'e': Action.BEGIN_EDIT,
    'i': Action.BEGIN_EDIT,
    'a': Action.BEGIN_EDIT,
    'j': Action.NAV_NEXT,
    'down': Action.NAV_NEXT,
    'k': Action.NAV_PREV,
    'up': Action.NAV_PREV,
    'g': Action.NAV_FIRST,
    'home': Action.NAV_FIRST,
    'G': Action.NAV_LAST,
    'end': Action.NAV_LAST,
    'enter': Action.TOGGLE,
    ' ': Action.TOGGLE,
    'd': Action.DELETE,
    'x': Action.DELETE,
    'delete': Action.DELETE,
}

INSERT_KEYS: Dict[str, Action] = {
    'enter': Action.COMMIT,
    'esc': Action.CANCEL,
    'ctrl+c': Action.CANCEL,
}

EMPTY_COMMIT_NOTICE = 'Nothing to add: the task description is empty.'


@dataclass
class AppState:
    todos: TodoList
    wrap: InitVar[bool] = False
    selection: Selection = field(init=False)
    entry: EntryBuffer = field(default_factory=EntryBuffer)
    mode: Mode = Mode.NORMAL
    running: bool = True
    notice: Optional[str] = None

    def __post_init__(self, wrap: bool) -> None:
        self.selection = Selection(len(self.todos), wrap=wrap)

    def selected_task(self) -> Optional[Task]:
        if self.selection.index is None:
            return None
        return self.todos.get(self.selection.index)


def resolve_action(mode: Mode, key: str) -> Optional[Action]:
    """Translate a key name into an action for the given mode (None = ignore)."""
    if mode is Mode.NORMAL:
        return NORMAL_KEYS.get(key)
    return INSERT_KEYS.get(key, Action.EDIT)


class Dispatcher:
    def __init__(self, storage: Storage, warn_empty_commit: bool = False):
        self.storage = storage
        self.warn_empty_commit = warn_empty_commit

    def handle_key(self, state: AppState, key: str) -> bool:
        """Apply one key press to state. Returns False once the loop should stop."""
        state.notice = None
        action = resolve_action(state.mode, key)
        if action is None or not is_allowed(state.mode, action):
            logger.debug('ignored key %r in %s mode', key, state.mode.value)
            return state.running
        handler = getattr(self, '_on_' + action.name.lower())
        handler(state, key)
        target = next_mode(state.mode, action)
        if target is None:
            state.running = False
        else:
            state.mode = target
        return state.running

    # -------------------- normal mode --------------------
    def _on_quit(self, state: AppState, key: str) -> None:
        logger.info('quit requested')

    def _on_begin_edit(self, state: AppState, key: str) -> None:
        state.entry.reset()

    def _on_nav_next(self, state: AppState, key: str) -> None:
        state.selection.next()

    def _on_nav_prev(self, state: AppState, key: str) -> None:
        state.selection.previous()

    def _on_nav_first(self, state: AppState, key: str) -> None:
        state.selection.select_first()

    def _on_nav_last(self, state: AppState, key: str) -> None:
        state.selection.select_last()

    def _on_toggle(self, state: AppState, key: str) -> None:
        task = state.selected_task()
        if task is None:
            return
        state.todos.toggle_by_id(task.id)
        self.storage.persist(state.todos)
        logger.info('toggled task %d (done=%s)', task.id, task.done)

    def _on_delete(self, state: AppState, key: str) -> None:
        task = state.selected_task()
        if task is None:
            return
        state.todos.remove_by_id(task.id)
        self.storage.persist(state.todos)
        state.selection.reconcile(len(state.todos))
        logger.info('deleted task %d', task.id)

    # -------------------- insert mode --------------------
    def _on_commit(self, state: AppState, key: str) -> None:
        description = state.entry.value()
        state.entry.reset()
        if not description:
            if self.warn_empty_commit:
                state.notice = EMPTY_COMMIT_NOTICE
            return
        task = state.todos.append(Task(id=0, description=description))
        self.storage.persist(state.todos)
        state.selection.reconcile(len(state.todos))
        state.selection.select_last()
        logger.info('added task %d', task.id)

    def _on_cancel(self, state: AppState, key: str) -> None:
        state.entry.reset()

    def _on_edit(self, state: AppState, key: str) -> None:
        if not state.entry.handle_key(key):
            logger.debug('ignored key %r in insert mode', key)
