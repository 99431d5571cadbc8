"""
To-Do list screen

Row 0 is the "Add task" affordance, the remaining rows are the cached
tasks from TodoManager. Selecting a task row deletes that task.
"""

import logging
from typing import List, Optional

from PIL import Image, ImageDraw

from wristdo.ui.drawing import load_font, text_width, wrap_text
from .manager import TodoManager
from .models import Task


class ToDoScreen:
    """
    To-Do list screen for a small square e-paper panel
    """

    ADD_ROW = 0

    def __init__(self, manager: TodoManager, width: int = 200, height: int = 200,
                 items_per_page: int = 3, font_size: int = 14):
        """
        Initialize To-Do screen

        Args:
            manager: TodoManager holding the cached task list
            width: Screen width
            height: Screen height
            items_per_page: Rows per page, counting the add row
            font_size: Task text font size
        """
        self.manager = manager
        self.width = width
        self.height = height
        self.items_per_page = max(1, items_per_page)
        self.logger = logging.getLogger(__name__)

        self.font = load_font("DejaVuSans.ttf", font_size)
        self.title_font = load_font("DejaVuSans-Bold.ttf", font_size + 4)
        self.small_font = load_font("DejaVuSans.ttf", max(8, font_size - 4))

        self.current_index = self.ADD_ROW
        self.current_page = 0

    def _row_count(self, tasks: List[Task]) -> int:
        return len(tasks) + 1

    def _clamp_selection(self, tasks: List[Task]):
        """Keep the selection valid after the list shrinks"""
        last = self._row_count(tasks) - 1
        if self.current_index > last:
            self.current_index = last
        self.current_page = self.current_index // self.items_per_page

    def next_item(self):
        """Move to next row (wraps to the add row)"""
        rows = self._row_count(self.manager.get_tasks())
        self.current_index = (self.current_index + 1) % rows
        self.current_page = self.current_index // self.items_per_page
        self.logger.debug(f"Selected row {self.current_index}")

    def prev_item(self):
        """Move to previous row (wraps to the last task)"""
        rows = self._row_count(self.manager.get_tasks())
        self.current_index = (self.current_index - 1) % rows
        self.current_page = self.current_index // self.items_per_page
        self.logger.debug(f"Selected row {self.current_index}")

    def get_selected_task(self) -> Optional[Task]:
        """
        Get the task under the selection

        Returns:
            Task, or None if the add row is selected
        """
        tasks = self.manager.get_tasks()
        self._clamp_selection(tasks)
        if self.current_index == self.ADD_ROW:
            return None
        return tasks[self.current_index - 1]

    def activate(self) -> Optional[str]:
        """
        Resolve a select press on the current row

        Returns:
            'add' on the add row, 'delete' on a task row
        """
        return 'add' if self.get_selected_task() is None else 'delete'

    def _draw_delete_marker(self, draw: ImageDraw.ImageDraw, x: int, y: int, size: int):
        """Boxed X on the right of a task row"""
        draw.rectangle([(x, y), (x + size, y + size)], outline=0, width=1)
        draw.line([(x + 3, y + 3), (x + size - 3, y + size - 3)], fill=0, width=2)
        draw.line([(x + size - 3, y + 3), (x + 3, y + size - 3)], fill=0, width=2)

    def _draw_centered(self, draw: ImageDraw.ImageDraw, y: int, text: str, font, fill=0):
        x = (self.width - text_width(draw, text, font)) // 2
        draw.text((x, y), text, font=font, fill=fill)

    def render(self) -> Image.Image:
        """
        Render the To-Do screen

        Returns:
            PIL Image (1-bit, for e-ink display)
        """
        tasks = self.manager.get_tasks()
        self._clamp_selection(tasks)

        image = Image.new('1', (self.width, self.height), 1)
        draw = ImageDraw.Draw(image)

        self._draw_centered(draw, 4, "To Do", self.title_font)
        y = 28
        draw.line([(6, y), (self.width - 6, y)], fill=0, width=2)
        y += 4

        if not self.manager.loaded and not self.manager.error:
            self._draw_centered(draw, self.height // 2 - 8, "Loading...", self.font)
            return image

        margin = 8
        marker_size = 14
        line_spacing = self.font.size + 3 if hasattr(self.font, 'size') else 14
        row_gap = 6

        start = self.current_page * self.items_per_page
        end = min(start + self.items_per_page, self._row_count(tasks))

        for row in range(start, end):
            if row == self.ADD_ROW:
                lines = ["+ Add task"]
            else:
                max_width = self.width - 2 * margin - marker_size - 6
                lines = wrap_text(draw, tasks[row - 1].text, self.font, max_width, max_lines=2)

            row_height = max(marker_size, len(lines) * line_spacing)
            selected = row == self.current_index
            text_fill = 0

            if selected:
                draw.rectangle(
                    [(margin - 4, y - 2), (self.width - margin + 4, y + row_height + 1)],
                    fill=0
                )
                text_fill = 1

            line_y = y
            for line in lines:
                draw.text((margin, line_y), line, font=self.font, fill=text_fill)
                line_y += line_spacing

            if row != self.ADD_ROW:
                marker_x = self.width - margin - marker_size
                if selected:
                    draw.rectangle(
                        [(marker_x, y), (marker_x + marker_size, y + marker_size)],
                        fill=1
                    )
                self._draw_delete_marker(draw, marker_x, y, marker_size)

            y += row_height + row_gap

        if not tasks:
            self._draw_centered(draw, y + 4, "No tasks yet", self.small_font)

        total_pages = (self._row_count(tasks) + self.items_per_page - 1) // self.items_per_page
        if total_pages > 1:
            self._draw_centered(draw, self.height - 16,
                                f"{self.current_page + 1}/{total_pages}", self.small_font)

        if self.manager.error:
            banner_top = self.height - 34
            draw.rectangle([(0, banner_top), (self.width, banner_top + 16)], fill=0)
            self._draw_centered(draw, banner_top + 2, "Storage error", self.small_font, fill=1)

        return image
