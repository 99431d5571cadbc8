"""
To-Do data records
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Task:
    """A single to-do entry. Rows map to the `tasks` table (id, task_text)."""

    id: int
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'text': self.text}
