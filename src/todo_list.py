"""In-memory task list: ordered tasks, id management and mutations.

Order is insertion order and only changes by append (at the end) or by
removal (later tasks shift down one position). Index based operations
treat an out-of-range index as a no-op and return None instead of raising,
so ordinary navigation on an empty list can never crash the editor.
"""
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional
from models import Task

Record = Dict[str, Any]


class TodoList:
    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self.tasks: List[Task] = []
        self._next_id: int = 1
        if tasks:
            self._load_tasks(tasks)

    # -------------------- loading --------------------
    def _load_tasks(self, tasks: Iterable[Task]) -> None:
        collected = list(tasks)
        known = [t.id for t in collected if t.id > 0]
        if known:
            self._next_id = max(known) + 1
        for task in collected:
            if task.id <= 0:
                task.id = self._allocate_id()
            self.tasks.append(task)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> 'TodoList':
        """Build a list from already validated storage records."""
        return cls(
            Task(id=int(raw.get('id') or 0), description=raw['description'], done=raw['done'])
            for raw in records
        )

    # -------------------- id management --------------------
    def _allocate_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    # -------------------- queries --------------------
    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def get(self, index: int) -> Optional[Task]:
        if 0 <= index < len(self.tasks):
            return self.tasks[index]
        return None

    def index_of(self, task_id: int) -> Optional[int]:
        for idx, task in enumerate(self.tasks):
            if task.id == task_id:
                return idx
        return None

    # -------------------- task operations --------------------
    def append(self, task: Task) -> Task:
        """Add a task at the end, assigning a fresh id when it has none."""
        if task.id <= 0 or self.index_of(task.id) is not None:
            task.id = self._allocate_id()
        else:
            self._next_id = max(self._next_id, task.id + 1)
        self.tasks.append(task)
        return task

    def remove(self, index: int) -> Optional[Task]:
        if not 0 <= index < len(self.tasks):
            return None
        return self.tasks.pop(index)

    def toggle(self, index: int) -> Optional[Task]:
        task = self.get(index)
        if task is None:
            return None
        task.done = not task.done
        return task

    def remove_by_id(self, task_id: int) -> Optional[Task]:
        idx = self.index_of(task_id)
        return None if idx is None else self.remove(idx)

    def toggle_by_id(self, task_id: int) -> Optional[Task]:
        idx = self.index_of(task_id)
        return None if idx is None else self.toggle(idx)

    # -------------------- serialization --------------------
    def to_records(self) -> List[Record]:
        return [task.to_record() for task in self.tasks]

    def __str__(self) -> str:
        done = sum(1 for t in self.tasks if t.done)
        return f'{len(self.tasks)} tasks, {done} done'
