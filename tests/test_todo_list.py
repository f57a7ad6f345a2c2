"""Tests for the in-memory todo list."""

import unittest

from models import Task
from todo_list import TodoList


def make_list(*descriptions):
    todos = TodoList()
    for desc in descriptions:
        todos.append(Task(id=0, description=desc))
    return todos


class TestAppend(unittest.TestCase):

    def test_append_preserves_order(self):
        todos = make_list("a", "b", "c", "d")
        self.assertEqual([t.description for t in todos], ["a", "b", "c", "d"])

    def test_append_allocates_increasing_ids(self):
        todos = make_list("a", "b")
        self.assertEqual([t.id for t in todos], [1, 2])

    def test_new_tasks_start_not_done(self):
        todos = make_list("a")
        self.assertFalse(todos.get(0).done)

    def test_ids_not_reused_after_remove(self):
        todos = make_list("a", "b")
        todos.remove(1)
        task = todos.append(Task(id=0, description="c"))
        self.assertEqual(task.id, 3)

    def test_duplicate_id_gets_replaced(self):
        todos = make_list("a")
        task = todos.append(Task(id=1, description="b"))
        self.assertEqual(task.id, 2)


class TestToggle(unittest.TestCase):

    def test_toggle_twice_restores_flag(self):
        todos = make_list("a", "b", "c")
        for idx in range(len(todos)):
            before = todos.get(idx).done
            todos.toggle(idx)
            self.assertNotEqual(todos.get(idx).done, before)
            todos.toggle(idx)
            self.assertEqual(todos.get(idx).done, before)

    def test_toggle_out_of_range_is_noop(self):
        todos = make_list("a")
        self.assertIsNone(todos.toggle(5))
        self.assertIsNone(todos.toggle(-1))
        self.assertFalse(todos.get(0).done)

    def test_toggle_on_empty_list(self):
        self.assertIsNone(TodoList().toggle(0))

    def test_toggle_by_id(self):
        todos = make_list("a", "b")
        todos.toggle_by_id(2)
        self.assertEqual([t.done for t in todos], [False, True])
        self.assertIsNone(todos.toggle_by_id(42))


class TestRemove(unittest.TestCase):

    def test_remove_shifts_later_tasks(self):
        for i in range(5):
            todos = make_list("a", "b", "c", "d", "e")
            before = list(todos)
            removed = todos.remove(i)
            self.assertIs(removed, before[i])
            self.assertEqual(len(todos), 4)
            self.assertEqual(list(todos)[:i], before[:i])
            self.assertEqual(list(todos)[i:], before[i + 1:])

    def test_remove_out_of_range_is_noop(self):
        todos = make_list("a")
        self.assertIsNone(todos.remove(1))
        self.assertIsNone(TodoList().remove(0))
        self.assertEqual(len(todos), 1)

    def test_remove_by_id(self):
        todos = make_list("a", "b", "c")
        todos.remove_by_id(2)
        self.assertEqual([t.description for t in todos], ["a", "c"])
        self.assertIsNone(todos.remove_by_id(2))


class TestRecords(unittest.TestCase):

    def test_from_records_assigns_missing_ids_after_known_ones(self):
        todos = TodoList.from_records([
            {"id": None, "description": "a", "done": False},
            {"id": 7, "description": "b", "done": True},
        ])
        self.assertEqual([t.id for t in todos], [8, 7])

    def test_to_records(self):
        todos = make_list("a")
        todos.toggle(0)
        self.assertEqual(todos.to_records(), [{"id": 1, "description": "a", "done": True}])


if __name__ == "__main__":
    unittest.main()
