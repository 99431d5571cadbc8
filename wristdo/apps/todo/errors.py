"""
Exceptions raised by the To-Do app.
"""


class TodoError(Exception):
    """Base class for To-Do errors"""


class ValidationError(TodoError):
    """Task text was empty or whitespace only"""


class NotFoundError(TodoError):
    """No stored task matches the requested id"""

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class StorageError(TodoError):
    """The underlying database failed"""


def validate_task_text(text) -> str:
    """
    Check user supplied task text

    Args:
        text: Raw text from the input screen or web form

    Returns:
        Text with surrounding whitespace removed

    Raises:
        ValidationError: If text is None, empty or whitespace only
    """
    if text is None or not str(text).strip():
        raise ValidationError("Task text is required")
    return str(text).strip()
