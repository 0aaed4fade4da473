from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from bingo_cards.core.pdf import TextSize
from bingo_cards.core.units import points_to_millimetres


DESCENT_RATIO = -0.2


class RecordingSurface:
    """Drawing surface that records primitives.

    Glyphs are half as wide as they are tall; a fifth of the height sits below the baseline.
    """

    def __init__(self) -> None:
        self.ops: list[tuple] = []
        self.font_name = "Helvetica"
        self.font_size = 12.0
        self.saved = 0

    def set_line_width(self, width: float) -> None:
        self.ops.append(("line_width", width))

    def set_font(self, name: str, size: float) -> None:
        self.font_name = name
        self.font_size = size

    def rect(self, x: float, y: float, w: float, h: float) -> None:
        self.ops.append(("rect", x, y, w, h))

    def text(self, text: str, x: float, y: float) -> None:
        self.ops.append(("text", text, x, y, self.font_name, self.font_size))

    def string_width(self, text: str, font_size: float) -> float:
        return 0.5 * font_size * len(text)

    def text_height(self, font_size: float) -> float:
        return float(font_size)

    def measure_text(self, text: str) -> TextSize:
        return TextSize(
            width=points_to_millimetres(self.string_width(text, self.font_size)),
            height=points_to_millimetres(self.text_height(self.font_size)),
            descent=points_to_millimetres(DESCENT_RATIO * self.font_size),
        )

    def image(self, raster, x: float, y: float, w: float, h: float) -> None:
        self.ops.append(("image", raster, x, y, w, h))

    def new_page(self) -> None:
        self.ops.append(("new_page",))

    def save(self) -> bytes:
        self.saved += 1
        self.ops.append(("save",))
        return b"%PDF-fake"

    def of_kind(self, kind: str) -> list[tuple]:
        return [op for op in self.ops if op[0] == kind]


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


def make_png(size: int = 50) -> bytes:
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    img.putpixel((size // 2, size // 2), (255, 0, 0, 255))
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def fake_svg(monkeypatch):
    """Replace the cairo rasterization step; returns the list of markups it was asked to render."""
    calls: list[str] = []

    def svg_to_png(markup: str, size: int) -> bytes:
        calls.append(markup)
        return make_png(size)

    monkeypatch.setattr("bingo_cards.core.joker._svg_to_png_bytes", svg_to_png)
    return calls
