from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Union

from .errors import CardShapeError


JOKER_SENTINEL = "$joker"


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Joker:
    pass


JOKER = Joker()

Cell = Union[Text, Joker]


def parse_cell(raw: str) -> Cell:
    if raw == JOKER_SENTINEL:
        return JOKER
    return Text(raw)


def cell_to_raw(cell: Cell) -> str:
    if isinstance(cell, Joker):
        return JOKER_SENTINEL
    return cell.value


@dataclass(frozen=True)
class Card:
    """One bingo sheet: outer tuple is columns, inner tuples are playable rows."""

    columns: tuple[tuple[Cell, ...], ...]

    @classmethod
    def from_values(cls, raw: Iterable[Iterable[str]]) -> "Card":
        return cls(columns=tuple(tuple(parse_cell(str(v)) for v in column) for column in raw))

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def row_count(self) -> int:
        return len(self.columns[0]) if self.columns else 0

    @property
    def has_joker(self) -> bool:
        return any(isinstance(cell, Joker) for column in self.columns for cell in column)

    def iter_text(self) -> Iterator[str]:
        for column in self.columns:
            for cell in column:
                if isinstance(cell, Text):
                    yield cell.value

    def to_values(self) -> list[list[str]]:
        return [[cell_to_raw(cell) for cell in column] for column in self.columns]


Deck = Sequence[Card]


def validate_card(card: Card) -> None:
    if card.column_count == 0:
        raise CardShapeError("card has no columns")
    lengths = {len(column) for column in card.columns}
    if len(lengths) != 1:
        raise CardShapeError(f"card is not rectangular (column lengths: {sorted(lengths)})")
    if 0 in lengths:
        raise CardShapeError("card has no rows")


def validate_deck(deck: Deck) -> None:
    if not deck:
        raise CardShapeError("deck is empty")
    for i, card in enumerate(deck, start=1):
        try:
            validate_card(card)
        except CardShapeError as exc:
            raise CardShapeError(f"card {i}: {exc}") from exc
