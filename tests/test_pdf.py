from pathlib import Path

import pytest

from bingo_cards.core.cards import JOKER_SENTINEL, Card
from bingo_cards.core.errors import CardShapeError, JokerRasterError, JokerUnavailableError
from bingo_cards.core.generator import generate_cards, number_pool
from bingo_cards.core.layout import DEFAULT_LAYOUT, Point
from bingo_cards.core.pdf import (
    ReportLabSurface,
    assign_slots,
    draw_card,
    header_letter,
    page_count,
    render_cards_pdf,
    render_deck,
)

SVG = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10"><rect width="10" height="10"/></svg>'


def _grid(columns=5, rows=5, prefix=""):
    return Card.from_values([[f"{prefix}{c * rows + r}" for r in range(rows)] for c in range(columns)])


def _card_frames(ops):
    """Outer card border rects, identified by the full card box size."""
    return [
        op
        for op in ops
        if op[0] == "rect" and op[3] == DEFAULT_LAYOUT.card_width and op[4] == DEFAULT_LAYOUT.card_height
    ]


@pytest.mark.parametrize("count,pages", [(1, 1), (4, 1), (5, 2), (8, 2), (9, 3)])
def test_page_count(count, pages):
    assert page_count(count, 4) == pages


def test_assign_slots_breaks_on_positive_multiples():
    assignments = list(assign_slots(9, 4))
    assert [a.slot for a in assignments] == [0, 1, 2, 3, 0, 1, 2, 3, 0]
    assert [a.index for a in assignments if a.new_page] == [4, 8]


def test_header_letters_cycle():
    assert "".join(header_letter(i) for i in range(12)) == "BINGOBINGOBI"


def test_header_row_uses_cycled_letters(surface):
    card = _grid(columns=7, rows=2)
    draw_card(surface, Point(0, 0), card, 1, layout=DEFAULT_LAYOUT, font_size=10)
    headers = [op[1] for op in surface.of_kind("text") if op[4] == DEFAULT_LAYOUT.header_font_name]
    assert headers == list("BINGOBI")


def test_single_card_scenario(surface):
    card = _grid()
    data = render_deck([card], surface, layout=DEFAULT_LAYOUT)

    assert data == b"%PDF-fake"
    assert surface.saved == 1
    assert not surface.of_kind("new_page")
    assert surface.of_kind("rect")[0] == ("rect", 10, 10, 133, 90)
    # border + 5 header cells + 25 grid cells
    assert len(surface.of_kind("rect")) == 31

    texts = surface.of_kind("text")
    label = texts[-1]
    assert label[1] == "1"
    assert label[5] == DEFAULT_LAYOUT.index_font_size
    assert label[2] < 10 + 133
    assert label[3] > 10 + 90
    assert {op[1] for op in texts if op[4] == DEFAULT_LAYOUT.font_name and op[5] != 8} >= {"0", "24"}


def test_five_cards_span_two_pages(surface):
    deck = [_grid(prefix=f"c{i}-") for i in range(5)]
    render_deck(deck, surface, layout=DEFAULT_LAYOUT)

    assert len(surface.of_kind("new_page")) == 1
    page_break = surface.ops.index(("new_page",))
    before = _card_frames(surface.ops[:page_break])
    after = _card_frames(surface.ops[page_break:])

    assert [(op[1], op[2]) for op in before] == [
        (p.x + DEFAULT_LAYOUT.offset_x, p.y + DEFAULT_LAYOUT.offset_y) for p in DEFAULT_LAYOUT.slots
    ]
    assert [(op[1], op[2]) for op in after] == [(10, 10)]

    labels = [op[1] for op in surface.of_kind("text") if op[5] == DEFAULT_LAYOUT.index_font_size]
    assert labels == ["1", "2", "3", "4", "5"]
    assert surface.ops[-1] == ("save",)


def test_joker_cells_embed_shared_raster(surface, fake_svg):
    deck = generate_cards(pool=number_pool(1, 75), size=5, count=3, joker=True, seed=7)
    render_deck(deck, surface, layout=DEFAULT_LAYOUT, joker_markup=SVG)

    assert fake_svg == [SVG]
    images = surface.of_kind("image")
    assert len(images) == 3
    assert len({id(op[1]) for op in images}) == 1

    # centre cell of the first card: column 2, row 3 counting the header
    _, _, x, y, w, h = images[0]
    col_w = 133 / 5
    row_h = 90 / 6
    assert w == h == pytest.approx(row_h)
    assert x == pytest.approx(10 + 2 * col_w + (col_w - row_h) / 2)
    assert y == pytest.approx(10 + 3 * row_h)
    assert JOKER_SENTINEL not in {op[1] for op in surface.of_kind("text")}


def test_joker_without_markup_draws_nothing(surface):
    card = Card.from_values([["1", JOKER_SENTINEL], ["3", "4"]])
    with pytest.raises(JokerUnavailableError, match="joker image unavailable"):
        render_deck([card], surface, layout=DEFAULT_LAYOUT)
    assert surface.ops == []


def test_draw_card_requires_raster_for_joker(surface):
    card = Card.from_values([[JOKER_SENTINEL]])
    with pytest.raises(JokerUnavailableError):
        draw_card(surface, Point(0, 0), card, 1, layout=DEFAULT_LAYOUT, font_size=10)


def test_raster_failure_draws_nothing(surface, monkeypatch):
    def broken(markup, size):
        raise ValueError("malformed svg")

    monkeypatch.setattr("bingo_cards.core.joker._svg_to_png_bytes", broken)
    card = Card.from_values([[JOKER_SENTINEL, "2"]])
    with pytest.raises(JokerRasterError):
        render_deck([card], surface, layout=DEFAULT_LAYOUT, joker_markup="<svg")
    assert surface.ops == []


def test_bad_shape_is_rejected_before_drawing(surface):
    deck = [_grid(), Card.from_values([["a", "b"], ["c"]])]
    with pytest.raises(CardShapeError, match="card 2"):
        render_deck(deck, surface, layout=DEFAULT_LAYOUT)
    assert surface.ops == []


def test_render_cards_pdf_produces_pdf_bytes():
    deck = generate_cards(pool=number_pool(1, 75), size=5, count=5, seed=1)
    pdf = render_cards_pdf(deck)
    assert pdf.startswith(b"%PDF-")


def test_render_cards_pdf_with_joker_writes_file(tmp_path: Path, fake_svg):
    deck = generate_cards(pool=[f"Word {i}" for i in range(30)], size=5, count=2, joker=True, seed=3)
    out = tmp_path / DEFAULT_LAYOUT.output_filename
    pdf = render_cards_pdf(deck, joker_markup=SVG, path=out)
    assert out.read_bytes() == pdf
    assert pdf.startswith(b"%PDF-")
    assert len(fake_svg) == 1


def _glyph_box(op, measure):
    """Top, bottom and horizontal centre of a recorded text op, in page millimetres."""
    x, baseline = op[2], op[3]
    size = measure(op)
    ascent = size.height + size.descent
    return baseline - ascent, baseline - size.descent, x + size.width / 2


def test_cell_and_header_text_centred_in_their_boxes(surface):
    card = Card.from_values([["gy"]])
    draw_card(surface, Point(0, 0), card, 1, layout=DEFAULT_LAYOUT, font_size=40)

    def measure(op):
        surface.set_font(op[4], op[5])
        return surface.measure_text(op[1])

    texts = surface.of_kind("text")
    header, cell = texts[0], texts[1]
    assert header[1] == "B"
    assert cell[1] == "gy"

    row_h = DEFAULT_LAYOUT.card_height / 2
    for op, box_top in ((header, 10), (cell, 10 + row_h)):
        top, bottom, centre_x = _glyph_box(op, measure)
        assert (top + bottom) / 2 == pytest.approx(box_top + row_h / 2)
        assert centre_x == pytest.approx(10 + DEFAULT_LAYOUT.card_width / 2)
        assert top > box_top
        assert bottom < box_top + row_h


class _TextRecordingSurface(ReportLabSurface):
    def __init__(self) -> None:
        super().__init__()
        self.texts: list[tuple] = []

    def text(self, text, x, y):
        self.texts.append((text, x, y, self.measure_text(text)))
        super().text(text, x, y)


def test_fitted_descenders_stay_inside_cells():
    surface = _TextRecordingSurface()
    card = Card.from_values([["gy", "jp"], ["yq", "gg"]])
    render_deck([card], surface, layout=DEFAULT_LAYOUT)

    row_h = DEFAULT_LAYOUT.card_height / 3
    rows = {"gy": 1, "jp": 2, "yq": 1, "gg": 2}
    drawn = [t for t in surface.texts if t[0] in rows]
    assert len(drawn) == 4
    for text, _, baseline, size in drawn:
        cell_top = DEFAULT_LAYOUT.offset_y + rows[text] * row_h
        top = baseline - (size.height + size.descent)
        bottom = baseline - size.descent
        assert cell_top < top
        assert bottom < cell_top + row_h
        assert (top + bottom) / 2 == pytest.approx(cell_top + row_h / 2)
