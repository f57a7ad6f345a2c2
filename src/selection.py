"""Selection cursor over the todo list.

Holds Optional[int]: None exactly when the list is empty, otherwise a valid
index. Movement clamps at the ends unless wrap is enabled.
"""
from typing import Optional


class Selection:
    def __init__(self, length: int = 0, wrap: bool = False):
        self.length = length
        self.wrap = wrap
        self.index: Optional[int] = None
        self.select_first()

    def select_first(self) -> None:
        self.index = 0 if self.length > 0 else None

    def select_last(self) -> None:
        self.index = self.length - 1 if self.length > 0 else None

    def next(self) -> None:
        if self.index is None:
            self.select_first()
        elif self.index < self.length - 1:
            self.index += 1
        elif self.wrap:
            self.index = 0

    def previous(self) -> None:
        if self.index is None:
            self.select_first()
        elif self.index > 0:
            self.index -= 1
        elif self.wrap:
            self.index = self.length - 1

    def reconcile(self, new_length: int) -> None:
        """Adopt a new list length and pull the index back into range."""
        self.length = new_length
        if new_length <= 0:
            self.index = None
        elif self.index is None:
            self.index = 0
        elif self.index >= new_length:
            self.index = new_length - 1

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Selection(index={self.index}, length={self.length})"
