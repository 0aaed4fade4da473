from __future__ import annotations

from dataclasses import dataclass, replace
import os
from typing import Mapping, NamedTuple

from .cards import Card


class Point(NamedTuple):
    x: float
    y: float


DEFAULT_SLOTS: tuple[Point, ...] = (
    Point(0, 0),
    Point(143, 0),
    Point(0, 100),
    Point(143, 100),
)


@dataclass(frozen=True)
class LayoutSettings:
    # Millimetres unless noted.
    offset_x: float = 10
    offset_y: float = 10
    card_width: float = 133
    card_height: float = 90
    slots: tuple[Point, ...] = DEFAULT_SLOTS
    cards_per_page: int = 4
    font_name: str = "Helvetica"
    header_font_name: str = "Helvetica-Bold"
    index_font_size: float = 8
    line_width: float = 0.3
    joker_pixels: int = 50
    output_filename: str = "bingo-cards.pdf"

    def __post_init__(self) -> None:
        if self.card_width <= 0 or self.card_height <= 0:
            raise ValueError("card_width and card_height must be > 0")
        if not 1 <= self.cards_per_page <= len(self.slots):
            raise ValueError(
                f"cards_per_page must be between 1 and {len(self.slots)}, got {self.cards_per_page}"
            )

    def slot_position(self, slot: int) -> Point:
        return self.slots[slot]


DEFAULT_LAYOUT = LayoutSettings()


_ENV_FLOATS = {
    "BINGO_OFFSET_X": "offset_x",
    "BINGO_OFFSET_Y": "offset_y",
    "BINGO_CARD_WIDTH": "card_width",
    "BINGO_CARD_HEIGHT": "card_height",
}


def layout_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    base: LayoutSettings = DEFAULT_LAYOUT,
) -> LayoutSettings:
    env = os.environ if environ is None else environ
    overrides: dict[str, object] = {}
    for name, attr in _ENV_FLOATS.items():
        raw = (env.get(name) or "").strip()
        if not raw:
            continue
        try:
            overrides[attr] = float(raw)
        except ValueError:
            raise ValueError(f"{name} must be a number, got {raw!r}") from None

    filename = (env.get("BINGO_OUTPUT_FILENAME") or "").strip()
    if filename:
        overrides["output_filename"] = filename

    return replace(base, **overrides) if overrides else base


def column_width(layout: LayoutSettings, card: Card) -> float:
    return layout.card_width / card.column_count


def row_height(layout: LayoutSettings, card: Card) -> float:
    # One extra row is reserved for the header.
    return layout.card_height / (card.row_count + 1)
