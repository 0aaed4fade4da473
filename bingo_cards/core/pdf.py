from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
import logging
import math
from pathlib import Path
from typing import Iterator, Protocol

from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from PIL import Image

from .cards import Card, Deck, Joker, validate_deck
from .errors import JokerUnavailableError, RenderError
from .fonts import fit_font_size
from .joker import JokerImage
from .layout import DEFAULT_LAYOUT, LayoutSettings, Point, column_width, row_height
from .units import millimetres_to_points, percent_of, points_to_millimetres


logger = logging.getLogger(__name__)

HEADER_LETTERS = ("B", "I", "N", "G", "O")


@dataclass(frozen=True)
class TextSize:
    width: float
    # ascent - descent
    height: float
    # Below the baseline, negative as in reportlab.
    descent: float = 0.0


class DrawingSurface(Protocol):
    """Page primitives in millimetres, origin at the top-left corner of the page."""

    def set_line_width(self, width: float) -> None: ...

    def set_font(self, name: str, size: float) -> None: ...

    def rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def text(self, text: str, x: float, y: float) -> None: ...

    def measure_text(self, text: str) -> TextSize: ...

    def string_width(self, text: str, font_size: float) -> float: ...

    def text_height(self, font_size: float) -> float: ...

    def image(self, raster: Image.Image, x: float, y: float, w: float, h: float) -> None: ...

    def new_page(self) -> None: ...

    def save(self) -> bytes: ...


class ReportLabSurface:
    """DrawingSurface backed by a reportlab canvas on landscape A4."""

    def __init__(self, path: Path | str | None = None, *, pagesize=landscape(A4)) -> None:
        self._path = Path(path) if path is not None else None
        self._buf = BytesIO()
        self._canvas = Canvas(str(self._path) if self._path else self._buf, pagesize=pagesize)
        self.page_width, self.page_height = pagesize
        self._font_name = "Helvetica"
        self._font_size = 12.0
        self._line_width = 1.0
        self._readers: dict[int, ImageReader] = {}
        self._saved = False
        self._canvas.setStrokeColorRGB(0, 0, 0)
        self._canvas.setFont(self._font_name, self._font_size)

    def _y(self, y: float) -> float:
        return self.page_height - y * mm

    def set_line_width(self, width: float) -> None:
        self._line_width = width
        self._canvas.setLineWidth(millimetres_to_points(width))

    def set_font(self, name: str, size: float) -> None:
        self._font_name = name
        self._font_size = size
        self._canvas.setFont(name, size)

    def rect(self, x: float, y: float, w: float, h: float) -> None:
        self._canvas.rect(x * mm, self._y(y + h), w * mm, h * mm, stroke=1, fill=0)

    def text(self, text: str, x: float, y: float) -> None:
        # y is the baseline.
        self._canvas.drawString(x * mm, self._y(y), text)

    def string_width(self, text: str, font_size: float) -> float:
        return self._canvas.stringWidth(text, self._font_name, font_size)

    def text_height(self, font_size: float) -> float:
        ascent, descent = pdfmetrics.getAscentDescent(self._font_name, font_size)
        return ascent - descent

    def measure_text(self, text: str) -> TextSize:
        ascent, descent = pdfmetrics.getAscentDescent(self._font_name, self._font_size)
        return TextSize(
            width=points_to_millimetres(self.string_width(text, self._font_size)),
            height=points_to_millimetres(ascent - descent),
            descent=points_to_millimetres(descent),
        )

    def image(self, raster: Image.Image, x: float, y: float, w: float, h: float) -> None:
        reader = self._readers.get(id(raster))
        if reader is None:
            reader = ImageReader(raster)
            self._readers[id(raster)] = reader
        self._canvas.drawImage(reader, x * mm, self._y(y + h), width=w * mm, height=h * mm)

    def new_page(self) -> None:
        self._canvas.showPage()
        # showPage resets the graphics state.
        self._canvas.setStrokeColorRGB(0, 0, 0)
        self._canvas.setFont(self._font_name, self._font_size)
        self._canvas.setLineWidth(millimetres_to_points(self._line_width))

    def save(self) -> bytes:
        if self._saved:
            raise RenderError("document has already been saved")
        self._canvas.save()
        self._saved = True
        if self._path is not None:
            return self._path.read_bytes()
        return self._buf.getvalue()


@dataclass(frozen=True)
class SlotAssignment:
    index: int
    slot: int
    new_page: bool


def assign_slots(count: int, cards_per_page: int) -> Iterator[SlotAssignment]:
    for i in range(count):
        slot = i % cards_per_page
        yield SlotAssignment(index=i, slot=slot, new_page=i > 0 and slot == 0)


def page_count(count: int, cards_per_page: int) -> int:
    return math.ceil(count / cards_per_page)


def header_letter(column: int) -> str:
    return HEADER_LETTERS[column % len(HEADER_LETTERS)]


def _draw_centred(surface: DrawingSurface, text: str, *, x: float, y: float, w: float, h: float) -> None:
    size = surface.measure_text(text)
    # Baseline that puts the middle of the ascent..descent box on the cell centre.
    ascent = size.height + size.descent
    surface.text(text, x + (w - size.width) / 2, y + h / 2 + (ascent + size.descent) / 2)


def draw_card(
    surface: DrawingSurface,
    position: Point,
    card: Card,
    index: int,
    *,
    layout: LayoutSettings,
    font_size: float,
    joker: Image.Image | None = None,
) -> None:
    x = position.x + layout.offset_x
    y = position.y + layout.offset_y
    col_w = column_width(layout, card)
    row_h = row_height(layout, card)

    surface.set_line_width(layout.line_width)
    surface.rect(x, y, layout.card_width, layout.card_height)

    header_size = millimetres_to_points(percent_of(60, row_h))
    for col, column in enumerate(card.columns):
        cx = x + col * col_w

        surface.rect(cx, y, col_w, row_h)
        surface.set_font(layout.header_font_name, header_size)
        _draw_centred(surface, header_letter(col), x=cx, y=y, w=col_w, h=row_h)

        surface.set_font(layout.font_name, font_size)
        for row, cell in enumerate(column, start=1):
            cy = y + row * row_h
            surface.rect(cx, cy, col_w, row_h)
            if isinstance(cell, Joker):
                if joker is None:
                    raise JokerUnavailableError()
                surface.image(joker, cx + (col_w - row_h) / 2, cy, row_h, row_h)
            else:
                _draw_centred(surface, cell.value, x=cx, y=cy, w=col_w, h=row_h)

    surface.set_font(layout.font_name, layout.index_font_size)
    label = str(index)
    size = surface.measure_text(label)
    surface.text(label, x + layout.card_width - size.width, y + layout.card_height + size.height)


def render_deck(
    deck: Deck,
    surface: DrawingSurface,
    *,
    layout: LayoutSettings = DEFAULT_LAYOUT,
    joker_markup: str | None = None,
) -> bytes:
    validate_deck(deck)

    joker: Image.Image | None = None
    if any(card.has_joker for card in deck):
        if not joker_markup:
            raise JokerUnavailableError()
        joker = JokerImage(joker_markup, size=layout.joker_pixels).raster

    for slot_info, card in zip(assign_slots(len(deck), layout.cards_per_page), deck):
        if slot_info.new_page:
            surface.new_page()

        surface.set_font(layout.font_name, layout.index_font_size)
        font_size = fit_font_size(
            card,
            percent_of(80, column_width(layout, card)),
            percent_of(80, row_height(layout, card)),
            surface,
        )
        logger.debug("Card %s -> slot %s (font %s)", slot_info.index + 1, slot_info.slot, font_size)
        draw_card(
            surface,
            layout.slot_position(slot_info.slot),
            card,
            slot_info.index + 1,
            layout=layout,
            font_size=font_size,
            joker=joker,
        )

    data = surface.save()
    logger.info(
        "Rendered %s card(s) on %s page(s)", len(deck), page_count(len(deck), layout.cards_per_page)
    )
    return data


def render_cards_pdf(
    deck: Deck,
    *,
    layout: LayoutSettings = DEFAULT_LAYOUT,
    joker_markup: str | None = None,
    path: Path | str | None = None,
) -> bytes:
    return render_deck(deck, ReportLabSurface(path), layout=layout, joker_markup=joker_markup)
