"""
Shared Pillow drawing helpers for WristDo screens.
"""

import logging
from typing import List

from PIL import ImageDraw, ImageFont

FONT_DIR = "/usr/share/fonts/truetype/dejavu"

logger = logging.getLogger(__name__)


def load_font(name: str, size: int):
    """
    Load a DejaVu TrueType font, falling back to Pillow's default

    Args:
        name: Font file name (e.g. 'DejaVuSans.ttf')
        size: Point size
    """
    try:
        return ImageFont.truetype(f"{FONT_DIR}/{name}", size)
    except Exception:
        logger.debug(f"Font {name} not found, using default")
        return ImageFont.load_default()


def text_width(draw: ImageDraw.ImageDraw, text: str, font) -> int:
    bbox = draw.textbbox((0, 0), text, font=font)
    return bbox[2] - bbox[0]


def wrap_text(draw: ImageDraw.ImageDraw, text: str, font, max_width: int, max_lines: int) -> List[str]:
    """
    Word wrap text to fit max_width

    Words longer than a line are cut with '...'. If the text needs more
    than max_lines, the last line gets an ellipsis.

    Returns:
        List of at most max_lines lines
    """
    lines: List[str] = []
    current: List[str] = []
    truncated = False
    words = text.split()

    for index, word in enumerate(words):
        candidate = ' '.join(current + [word])
        if text_width(draw, candidate, font) <= max_width:
            current.append(word)
            continue

        if current:
            lines.append(' '.join(current))
            current = []
            if len(lines) >= max_lines:
                truncated = True
                break

        if text_width(draw, word, font) <= max_width:
            current = [word]
        else:
            # Word wider than a whole line gets a line of its own, cut short
            lines.append(_fit_word(draw, word, font, max_width))
            if len(lines) >= max_lines:
                truncated = index < len(words) - 1
                break

    if current and not truncated:
        if len(lines) < max_lines:
            lines.append(' '.join(current))
        else:
            truncated = True

    if truncated and lines:
        lines = lines[:max_lines]
        last = lines[-1]
        if not last.endswith("..."):
            lines[-1] = _fit_word(draw, last + "...", font, max_width)
    return lines


def _fit_word(draw: ImageDraw.ImageDraw, word: str, font, max_width: int) -> str:
    if text_width(draw, word, font) <= max_width:
        return word
    cut = word.rstrip('.')
    while cut:
        if text_width(draw, cut + "...", font) <= max_width:
            return cut + "..."
        cut = cut[:-1]
    return "..."
