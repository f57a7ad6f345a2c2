"""Data models for the terminal todo editor.

Exposes the Task dataclass and the Mode enum. A task is addressed by its
integer id inside the application; list position is only used at the
render/dispatch boundary. Ids are persisted so they stay stable across runs.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Mode(Enum):
    """Input mode. Normal navigates and runs commands, Insert composes text."""
    NORMAL = "normal"
    INSERT = "insert"


@dataclass
class Task:
    """A single todo entry.

    Fields:
        id: Integer allocated by TodoList on append (0 = not yet assigned).
        description: Short, single-line text; never edited after creation.
        done: Completion flag, flipped in place by toggle.
    """
    id: int
    description: str
    done: bool = False

    def to_record(self) -> dict:
        # key order is part of the on-disk format
        return {'id': self.id, 'description': self.description, 'done': self.done}

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, description={self.description}, done={self.done})"
