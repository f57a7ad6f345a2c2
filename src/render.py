"""Render projection: application state -> frame description.

Pure and side-effect free. It never touches storage; the loop hands it the
current state each iteration and the terminal backend paints the result.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from dispatch import AppState
from models import Mode, Task

TITLE = " Term_Todo "
DONE_GLYPH = "✓"
HIGHLIGHT_SYMBOL = ">> "

FOOTERS = {
    Mode.NORMAL: "q quit | e edit | j/k move | enter toggle | d delete",
    Mode.INSERT: "enter add task | esc back to normal mode",
}


@dataclass(frozen=True)
class Row:
    text: str
    done: bool
    selected: bool


@dataclass(frozen=True)
class InputField:
    value: str
    cursor_column: int
    active: bool


@dataclass(frozen=True)
class Frame:
    title: str
    mode: Mode
    rows: List[Row] = field(default_factory=list)
    selected: Optional[int] = None
    input: InputField = InputField('', 0, False)
    footer: str = ''
    notice: Optional[str] = None


def row_text(task: Task) -> str:
    glyph = DONE_GLYPH if task.done else " "
    return f"{task.description} {glyph}"


def project(state: AppState) -> Frame:
    selected = state.selection.index
    rows = [
        Row(text=row_text(task), done=task.done, selected=(idx == selected))
        for idx, task in enumerate(state.todos)
    ]
    insert = state.mode is Mode.INSERT
    field_ = InputField(
        value=state.entry.value() if insert else '',
        cursor_column=state.entry.visual_cursor() if insert else 0,
        active=insert,
    )
    return Frame(
        title=TITLE,
        mode=state.mode,
        rows=rows,
        selected=selected,
        input=field_,
        footer=FOOTERS[state.mode],
        notice=state.notice,
    )
