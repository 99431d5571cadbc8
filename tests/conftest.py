"""
Shared fixtures for WristDo tests
"""

import sys
from pathlib import Path
from typing import List

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from wristdo.apps.todo.errors import NotFoundError, StorageError
from wristdo.apps.todo.manager import TodoManager
from wristdo.apps.todo.models import Task
from wristdo.apps.todo.store import TaskStore


class FakeStore:
    """In-memory stand-in for TaskStore that records calls and can fail on demand"""

    def __init__(self):
        self.rows: List[Task] = []
        self.calls: List[str] = []
        self.fail = False
        self._next_id = 1

    def _check(self, name: str):
        self.calls.append(name)
        if self.fail:
            raise StorageError(f"{name} failed: disk I/O error")

    def insert(self, text: str) -> Task:
        self._check('insert')
        task = Task(id=self._next_id, text=text)
        self._next_id += 1
        self.rows.append(task)
        return task

    def list_all(self) -> List[Task]:
        self._check('list_all')
        return list(self.rows)

    def delete(self, task):
        self._check('delete')
        task_id = task.id if isinstance(task, Task) else int(task)
        before = len(self.rows)
        self.rows = [t for t in self.rows if t.id != task_id]
        if len(self.rows) == before:
            raise NotFoundError(task_id)

    def count(self) -> int:
        return len(self.rows)

    def close(self):
        self.calls.append('close')


@pytest.fixture()
def store(tmp_path: Path) -> TaskStore:
    return TaskStore(tmp_path / "tasks.db")


@pytest.fixture()
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture()
def manager(store: TaskStore):
    mgr = TodoManager(store)
    yield mgr
    mgr.close()


@pytest.fixture()
def fake_manager(fake_store: FakeStore):
    mgr = TodoManager(fake_store)
    yield mgr
    mgr.close()
