"""
To-Do Task Store

SQLite persistence for To-Do tasks. One table:

    tasks(id INTEGER PRIMARY KEY AUTOINCREMENT, task_text TEXT NOT NULL)

Each call opens its own connection, so the store can be used from the
manager's worker thread and from tests alike.
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import List, Union

from .errors import NotFoundError, StorageError
from .models import Task


SCHEMA = """
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    task_text TEXT NOT NULL
)
"""


class TaskStore:
    """Insert, list and delete tasks in a local SQLite database"""

    def __init__(self, db_path: str = "data/tasks.db"):
        """
        Open (and create if missing) the task database

        Args:
            db_path: Path to SQLite database file
        """
        self.logger = logging.getLogger(__name__)
        self.db_path = Path(db_path)

        os.makedirs(self.db_path.parent, exist_ok=True)

        self._ensure_schema()
        self.logger.info(f"TaskStore ready: {self.db_path} ({self.count()} tasks)")

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(str(self.db_path), timeout=10.0)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self):
        conn = self._connect()
        try:
            conn.execute(SCHEMA)
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to create tasks table: {e}") from e
        finally:
            conn.close()

    def insert(self, text: str) -> Task:
        """
        Persist a new task

        Args:
            text: Task text (validated by the caller)

        Returns:
            The stored Task with its assigned id
        """
        conn = self._connect()
        try:
            cur = conn.execute("INSERT INTO tasks (task_text) VALUES (?)", (text,))
            conn.commit()
            task = Task(id=int(cur.lastrowid), text=text)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to insert task: {e}") from e
        finally:
            conn.close()

        self.logger.debug(f"Inserted task {task.id}: {text}")
        return task

    def list_all(self) -> List[Task]:
        """
        Read every stored task

        Returns:
            Tasks ordered by id (insertion order)
        """
        conn = self._connect()
        try:
            rows = conn.execute("SELECT id, task_text FROM tasks ORDER BY id ASC").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list tasks: {e}") from e
        finally:
            conn.close()

        return [Task(id=int(row['id']), text=row['task_text']) for row in rows]

    def delete(self, task: Union[Task, int]):
        """
        Remove a stored task

        Args:
            task: Task or task id to remove

        Raises:
            NotFoundError: If no row has that id
        """
        task_id = task.id if isinstance(task, Task) else int(task)

        conn = self._connect()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
            deleted = cur.rowcount
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete task {task_id}: {e}") from e
        finally:
            conn.close()

        if deleted == 0:
            raise NotFoundError(task_id)

        self.logger.debug(f"Deleted task {task_id}")

    def count(self) -> int:
        """Number of stored tasks"""
        conn = self._connect()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to count tasks: {e}") from e
        finally:
            conn.close()
        return int(n)

    def close(self):
        """Shutdown hook (connections are per call, nothing to release)"""
        self.logger.debug("TaskStore closed")
