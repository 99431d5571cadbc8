"""
To-Do List App Module

Provides the WristDo To-Do list:
- TaskStore: SQLite persistence
- TodoManager: Cached task list, background store calls
- ToDoScreen / TextInputScreen: E-paper screens
- create_todo_blueprint: Flask routes for remote text entry
"""

from .errors import TodoError, ValidationError, NotFoundError, StorageError, validate_task_text
from .models import Task
from .store import TaskStore
from .manager import TodoManager
from .screen import ToDoScreen
from .input_screen import TextInputScreen
from .routes import create_todo_blueprint

__all__ = [
    'Task', 'TaskStore', 'TodoManager', 'ToDoScreen', 'TextInputScreen',
    'create_todo_blueprint', 'validate_task_text',
    'TodoError', 'ValidationError', 'NotFoundError', 'StorageError',
]
