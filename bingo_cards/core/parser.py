from __future__ import annotations

from dataclasses import dataclass
import json
import re
from typing import Iterable

from .cards import JOKER_SENTINEL, Card


_SPLIT_RE = re.compile(r"[\n,;]")
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ParseResult:
    values: list[str]
    ignored_lines: list[str]


def _iter_nonempty_entries(text: str) -> Iterable[str]:
    for raw in _SPLIT_RE.split(text):
        entry = raw.strip()
        if not entry:
            continue
        yield entry


def parse_strings_text(text: str) -> ParseResult:
    casefold_to_value: dict[str, str] = {}
    ignored: list[str] = []

    for entry in _iter_nonempty_entries(text):
        value = _WS_RE.sub(" ", entry)
        if value == JOKER_SENTINEL:
            ignored.append(entry)
            continue
        casefold_to_value.setdefault(value.casefold(), value)

    return ParseResult(values=list(casefold_to_value.values()), ignored_lines=ignored)


def parse_range(raw_min: str, raw_max: str) -> tuple[int, int]:
    try:
        minimum = int(str(raw_min).strip())
        maximum = int(str(raw_max).strip())
    except ValueError:
        raise ValueError("Range minimum and maximum must be whole numbers.") from None
    if minimum > maximum:
        raise ValueError(f"Range minimum ({minimum}) must not exceed maximum ({maximum}).")
    return minimum, maximum


def parse_deck_json(text: str) -> list[Card]:
    """Cards from a JSON list of columns-of-strings; "$joker" marks the joker cell."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Deck is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise ValueError("Deck must be a JSON list of cards.")

    cards: list[Card] = []
    for i, raw_card in enumerate(data, start=1):
        if not isinstance(raw_card, list) or not all(isinstance(col, list) for col in raw_card):
            raise ValueError(f"Card {i} must be a list of columns.")
        if not all(isinstance(value, str) for col in raw_card for value in col):
            raise ValueError(f"Card {i} cells must all be strings.")
        cards.append(Card.from_values(raw_card))
    return cards
