"""Persistence helpers (load/persist) for the todo list.

Decisions:
- The JSON store is rewritten in full on every mutation: temp file in the
  same directory, fsync, then os.replace. A failed write leaves the previous
  file untouched.
- Output is deterministic (fixed key order, indent=4, trailing newline) so
  persisting a freshly loaded list reproduces the same bytes.
- Absent or blank file means an empty list. Anything else that does not parse
  is CorruptDataError; there is no "keep what parses" recovery.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from logging_setup import get_logger
from todo_list import TodoList

logger = get_logger(__name__)

TASKS_FILE = Path.home() / '.term_todo.json'
PLAIN_FILE = Path.home() / '.term_todo.txt'
FORMAT_VERSION = 1

PathLike = Union[str, Path]
TaskEntry = Dict[str, Any]


class StoreError(Exception):
    """Base class for persistence failures."""


class StorageIOError(StoreError):
    """The store file could not be read or written."""


class CorruptDataError(StoreError):
    """The store file exists but its content cannot be parsed."""


def _read_text(path: Path) -> Optional[str]:
    if not path.exists():
        return None
    try:
        return path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as exc:
        raise StorageIOError(f'could not read {path}: {exc}') from exc


def _write_atomic(path: Path, content: str) -> None:
    """Replace path's content with content, or leave it untouched on failure."""
    tmp: Optional[str] = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix='.tmp_', suffix=path.suffix)
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except OSError as exc:
        if tmp and os.path.exists(tmp):
            os.unlink(tmp)
        raise StorageIOError(f'could not write {path}: {exc}') from exc


def _validate_records(raw: Any, path: Path) -> List[TaskEntry]:
    if isinstance(raw, dict):
        if 'tasks' not in raw:
            raise CorruptDataError(f'{path}: missing "tasks" key')
        raw = raw['tasks']
    if not isinstance(raw, list):
        raise CorruptDataError(f'{path}: expected a list of tasks')
    seen = set()
    records: List[TaskEntry] = []
    for pos, entry in enumerate(raw, start=1):
        if not isinstance(entry, dict):
            raise CorruptDataError(f'{path}: task #{pos} is not an object')
        desc = entry.get('description')
        done = entry.get('done')
        tid = entry.get('id')
        if not isinstance(desc, str):
            raise CorruptDataError(f'{path}: task #{pos} has no text description')
        if not isinstance(done, bool):
            raise CorruptDataError(f'{path}: task #{pos} has no boolean "done"')
        if tid is not None:
            if isinstance(tid, bool) or not isinstance(tid, int) or tid <= 0:
                raise CorruptDataError(f'{path}: task #{pos} has an invalid id')
            if tid in seen:
                raise CorruptDataError(f'{path}: duplicate task id {tid}')
            seen.add(tid)
        records.append({'id': tid, 'description': desc, 'done': done})
    return records


def serialize(todos: TodoList) -> str:
    doc = {'version': FORMAT_VERSION, 'tasks': todos.to_records()}
    return json.dumps(doc, indent=4, ensure_ascii=False) + '\n'


class Storage:
    """JSON backed store for the interactive editor."""

    def __init__(self, path: PathLike = TASKS_FILE):
        self.path = Path(path).expanduser()

    def load(self) -> TodoList:
        """Load the todo list from disk.

        Missing or blank file -> empty list. Raises CorruptDataError for
        content that does not parse and StorageIOError if the file cannot be
        read.
        """
        text = _read_text(self.path)
        if text is None or not text.strip():
            logger.debug('no stored tasks at %s', self.path)
            return TodoList()
        try:
            raw = json.loads(text)
        except ValueError as exc:
            logger.error('corrupt store %s: %s', self.path, exc)
            raise CorruptDataError(f'{self.path}: {exc}') from exc
        try:
            records = _validate_records(raw, self.path)
        except CorruptDataError as exc:
            logger.error('corrupt store: %s', exc)
            raise
        todos = TodoList.from_records(records)
        logger.debug('loaded %d tasks from %s', len(todos), self.path)
        return todos

    def persist(self, todos: TodoList) -> None:
        """Rewrite the whole store so it mirrors todos exactly."""
        _write_atomic(self.path, serialize(todos))
        logger.debug('persisted %d tasks to %s', len(todos), self.path)


class LineStorage:
    """Plain text store: one task description per line, no completion flag."""

    def __init__(self, path: PathLike = PLAIN_FILE):
        self.path = Path(path).expanduser()

    def load(self) -> List[str]:
        text = _read_text(self.path)
        if text is None:
            return []
        return [line for line in text.splitlines() if line.strip()]

    def save(self, descriptions: List[str]) -> None:
        content = ''.join(f'{d}\n' for d in descriptions)
        _write_atomic(self.path, content)
        logger.debug('saved %d lines to %s', len(descriptions), self.path)
