from __future__ import annotations

import logging
import math
from typing import Protocol

from .cards import Card
from .units import points_to_millimetres


logger = logging.getLogger(__name__)

MIN_FONT_SIZE = 1
FALLBACK_FONT_SIZE = 16


class TextMetrics(Protocol):
    def string_width(self, text: str, font_size: float) -> float: ...

    def text_height(self, font_size: float) -> float: ...


def longest_text(card: Card) -> str:
    longest = ""
    for text in card.iter_text():
        if len(text) > len(longest):
            longest = text
    return longest


def fit_font_size(card: Card, width: float, height: float, measure: TextMetrics) -> int:
    """Largest integer font size whose longest cell text fits a `width` x `height` mm box.

    The width of the longest string fixes an upper estimate; the size is then
    lowered one point at a time until the text height fits as well.
    """
    text = longest_text(card)
    unit_width = points_to_millimetres(measure.string_width(text, 1)) if text else 0.0

    if unit_width > 0:
        size = max(MIN_FONT_SIZE, math.floor(width / unit_width))
    else:
        size = FALLBACK_FONT_SIZE

    while size > MIN_FONT_SIZE and points_to_millimetres(measure.text_height(size)) > height:
        size -= 1

    logger.debug("Fitted font size %s for %r in %.1fx%.1f mm", size, text, width, height)
    return size
