"""
To-Do List Manager

Owns the in-memory task list shown on the To-Do screen and runs every
store call on a background worker, re-reading the full list afterwards.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Union

from .errors import NotFoundError, StorageError, ValidationError, validate_task_text
from .models import Task
from .store import TaskStore


class TodoManager:
    """Manages the cached To-Do list and its persistence"""

    def __init__(self, store: TaskStore, on_change: Optional[Callable[[], None]] = None):
        """
        Initialize TodoManager

        Args:
            store: TaskStore used for all reads and writes
            on_change: Called (from the worker thread) after the cached list
                or error state changes, typically to re-render the screen
        """
        self.store = store
        self.on_change = on_change
        self.logger = logging.getLogger(__name__)

        self.tasks: List[Task] = []
        self.loaded = False
        self.error: Optional[str] = None

        self._lock = threading.Lock()
        self._closed = False
        # One worker: jobs run in submission order, never concurrently
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="todo-store")

    def get_tasks(self) -> List[Task]:
        """Snapshot of the cached task list"""
        with self._lock:
            return list(self.tasks)

    def refresh(self) -> Future:
        """
        Re-read the task list from the store

        Returns:
            Future resolving to the new list (None if the store failed)
        """
        return self._submit(None, "refresh")

    def add_task(self, text: str) -> Optional[Future]:
        """
        Store a new task and refresh the list

        Blank text is dropped here and never reaches the store.

        Args:
            text: Task text from the input screen or web form

        Returns:
            Future resolving to the refreshed list, or None if text was blank
        """
        try:
            text = validate_task_text(text)
        except ValidationError:
            self.logger.debug("Ignoring blank task text")
            return None

        return self._submit(lambda: self.store.insert(text), f"add '{text}'")

    def delete_task(self, task: Union[Task, int], report_missing: bool = False) -> Future:
        """
        Delete a task and refresh the list

        A task that is already gone is logged and the list is still
        refreshed. With report_missing the future then fails with
        NotFoundError instead of resolving to the list.

        Args:
            task: Task or task id to delete
            report_missing: Raise NotFoundError through the future on a miss

        Returns:
            Future resolving to the refreshed list
        """
        task_id = task.id if isinstance(task, Task) else int(task)
        return self._submit(lambda: self.store.delete(task_id), f"delete {task_id}",
                            report_missing=report_missing)

    def _submit(self, mutation: Optional[Callable], description: str,
                report_missing: bool = False) -> Future:
        if self._closed:
            raise RuntimeError("TodoManager is closed")
        return self._executor.submit(self._run_job, mutation, description, report_missing)

    def _run_job(self, mutation: Optional[Callable], description: str,
                 report_missing: bool = False) -> Optional[List[Task]]:
        """Worker side: mutate, re-read, publish"""
        missing: Optional[NotFoundError] = None
        try:
            if mutation is not None:
                try:
                    mutation()
                except NotFoundError as e:
                    self.logger.warning(f"{description}: {e}")
                    missing = e
            tasks = self.store.list_all()
        except StorageError as e:
            self.logger.error(f"Store {description} failed: {e}")
            with self._lock:
                self.error = str(e)
            self._notify()
            return None
        except Exception as e:
            self.logger.error(f"Unexpected error during {description}: {e}", exc_info=True)
            raise

        with self._lock:
            self.tasks = tasks
            self.loaded = True
            self.error = None

        self.logger.info(f"{description}: {len(tasks)} tasks")
        self._notify()

        if missing is not None and report_missing:
            raise missing
        return tasks

    def _notify(self):
        if not self.on_change:
            return
        try:
            self.on_change()
        except Exception as e:
            self.logger.error(f"Error in change callback: {e}", exc_info=True)

    def close(self):
        """Cancel queued jobs and wait for the running one"""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True, cancel_futures=True)
        self.logger.info("TodoManager closed")
