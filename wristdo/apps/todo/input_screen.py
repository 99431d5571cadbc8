"""
Text entry screen for new To-Do tasks

Modal: begin() opens it with a completion callback, which receives the
typed text on commit or None on cancel.
"""

import logging
from typing import Callable, Optional

from PIL import Image, ImageDraw

from wristdo.ui.drawing import load_font, text_width


class TextInputScreen:
    """
    Free-text capture for a new task
    """

    def __init__(self, width: int = 200, height: int = 200, font_size: int = 14,
                 prompt: str = "New task", max_length: int = 120):
        """
        Initialize text input screen

        Args:
            width: Screen width
            height: Screen height
            font_size: Font size for typed text
            prompt: Title shown above the text
            max_length: Maximum number of characters accepted
        """
        self.width = width
        self.height = height
        self.prompt = prompt
        self.max_length = max_length
        self.logger = logging.getLogger(__name__)

        self.font = load_font("DejaVuSansMono.ttf", font_size)
        self.title_font = load_font("DejaVuSans-Bold.ttf", font_size + 2)
        self.small_font = load_font("DejaVuSans.ttf", max(8, font_size - 4))

        self.text = ""
        self.active = False
        self._on_done: Optional[Callable[[Optional[str]], None]] = None

    def begin(self, on_done: Callable[[Optional[str]], None]):
        """
        Start capturing text

        Args:
            on_done: Called with the text on commit, None on cancel
        """
        self.text = ""
        self.active = True
        self._on_done = on_done
        self.logger.debug("Text input started")

    def type_char(self, char: str):
        """Append typed characters, up to max_length"""
        if not self.active or not char:
            return
        room = self.max_length - len(self.text)
        if room <= 0:
            self.logger.debug("Input full, ignoring character")
            return
        self.text += char[:room]

    def backspace(self):
        if self.active and self.text:
            self.text = self.text[:-1]

    def commit(self):
        """Finish input and hand the text to the callback"""
        self._finish(self.text)

    def cancel(self):
        """Abandon input"""
        self._finish(None)

    def _finish(self, result: Optional[str]):
        if not self.active:
            return
        callback = self._on_done
        self.active = False
        self._on_done = None
        self.text = ""
        self.logger.debug(f"Text input {'committed' if result is not None else 'cancelled'}")
        if callback:
            callback(result)

    def handle_key(self, key_code: int, char: Optional[str] = None, modifiers: dict = None):
        """
        Handle keyboard input

        Args:
            key_code: evdev key code
            char: Character if printable
            modifiers: Dict with 'shift', 'ctrl', 'alt' boolean flags
        """
        modifiers = modifiers or {}
        try:
            from evdev import ecodes

            if key_code in (ecodes.KEY_ENTER, ecodes.KEY_KPENTER):
                self.commit()
            elif key_code == ecodes.KEY_ESC:
                self.cancel()
            elif key_code == ecodes.KEY_BACKSPACE:
                self.backspace()
            elif modifiers.get('ctrl') and key_code == ecodes.KEY_U:
                self.text = ""
            elif char and char.isprintable():
                self.type_char(char)
        except ImportError:
            # evdev missing (testing): printable characters only
            if char and char.isprintable():
                self.type_char(char)

    def _visible_lines(self, draw: ImageDraw.ImageDraw, max_width: int, max_lines: int):
        """Break the buffer into character-wrapped lines, keeping the tail visible"""
        lines = []
        current = ""
        for ch in self.text + "_":
            if current and text_width(draw, current + ch, self.font) > max_width:
                lines.append(current)
                current = ch
            else:
                current += ch
        lines.append(current)
        return lines[-max_lines:]

    def render(self) -> Image.Image:
        """
        Render the input screen

        Returns:
            PIL Image (1-bit, for e-ink display)
        """
        image = Image.new('1', (self.width, self.height), 1)
        draw = ImageDraw.Draw(image)

        title_x = (self.width - text_width(draw, self.prompt, self.title_font)) // 2
        draw.text((title_x, 4), self.prompt, font=self.title_font, fill=0)
        draw.line([(6, 26), (self.width - 6, 26)], fill=0, width=2)

        box_top = 32
        box_bottom = self.height - 30
        draw.rectangle([(6, box_top), (self.width - 6, box_bottom)], outline=0, width=1)

        line_height = getattr(self.font, 'size', 12) + 4
        max_lines = max(1, (box_bottom - box_top - 8) // line_height)
        y = box_top + 4
        for line in self._visible_lines(draw, self.width - 20, max_lines):
            draw.text((10, y), line, font=self.font, fill=0)
            y += line_height

        counter = f"{len(self.text)}/{self.max_length}"
        draw.text((8, self.height - 24), "Enter: save  Esc: cancel", font=self.small_font, fill=0)
        draw.text((self.width - 8 - text_width(draw, counter, self.small_font), self.height - 12),
                  counter, font=self.small_font, fill=0)

        return image
