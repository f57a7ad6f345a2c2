"""Interactive application loop.

render -> wait for a key -> dispatch -> repeat, until the quit transition.
The terminal is restored by Terminal.__exit__ whatever ends the loop.
"""
from typing import Optional

from config import Config
from dispatch import AppState, Dispatcher
from logging_setup import get_logger
from render import project
from storage import Storage
from terminal import Terminal
from theme import build_palette

logger = get_logger(__name__)


class App:
    def __init__(self, config: Config, storage: Optional[Storage] = None):
        self.config = config
        self.storage = storage or Storage(config.tasks_file)
        todos = self.storage.load()
        self.state = AppState(todos=todos, wrap=config.wrap_navigation)
        self.dispatcher = Dispatcher(self.storage, warn_empty_commit=config.warn_empty_commit)

    def step(self, terminal: Terminal) -> bool:
        """Paint the current state, then handle one key. False once quitting."""
        terminal.paint(project(self.state))
        key = terminal.read_key()
        return self.dispatcher.handle_key(self.state, key)

    def run(self, terminal: Optional[Terminal] = None) -> None:
        terminal = terminal or Terminal(
            alt_screen=self.config.alt_screen,
            palette=build_palette(self.config.colors),
        )
        logger.info('session started with %s', self.state.todos)
        with terminal:
            try:
                while self.step(terminal):
                    pass
            except EOFError:
                logger.info('input closed, leaving')
        logger.info('session ended with %s', self.state.todos)
