from __future__ import annotations

import hashlib
import random

from .cards import JOKER, Card, Cell, Text


def number_pool(minimum: int, maximum: int) -> list[str]:
    if minimum > maximum:
        raise ValueError(f"minimum ({minimum}) must not exceed maximum ({maximum})")
    return [str(n) for n in range(minimum, maximum + 1)]


def joker_position(size: int) -> tuple[int, int]:
    # Centre cell for odd sizes, otherwise the top-left cell.
    if size % 2:
        return size // 2, size // 2
    return 0, 0


def _card_signature(values: tuple[str, ...]) -> str:
    return hashlib.sha256("\n".join(values).encode("utf-8")).hexdigest()


def _build_card(values: tuple[str, ...], *, size: int, joker: bool) -> Card:
    remaining = iter(values)
    jx, jy = joker_position(size)
    columns: list[tuple[Cell, ...]] = []
    for col in range(size):
        cells: list[Cell] = []
        for row in range(size):
            if joker and (col, row) == (jx, jy):
                cells.append(JOKER)
            else:
                cells.append(Text(next(remaining)))
        columns.append(tuple(cells))
    return Card(columns=tuple(columns))


def generate_cards(
    *,
    pool: list[str],
    size: int = 5,
    count: int = 1,
    ordered: bool = True,
    joker: bool = False,
    seed: int | None = None,
    max_attempts_per_card: int = 1000,
) -> list[Card]:
    if size < 1:
        raise ValueError("size must be > 0")
    if count <= 0:
        raise ValueError("count must be > 0")
    unique_pool = list(dict.fromkeys(pool))
    needed = size * size - (1 if joker else 0)
    if len(unique_pool) < needed:
        raise ValueError(f"Need at least {needed} unique values, got {len(unique_pool)}")

    order = {value: i for i, value in enumerate(unique_pool)}
    rng = random.Random(seed)
    seen: set[str] = set()
    cards: list[Card] = []

    for _ in range(count):
        for _attempt in range(max_attempts_per_card):
            values = rng.sample(unique_pool, k=needed)
            if ordered:
                values.sort(key=order.__getitem__)
            picked = tuple(values)

            sig = _card_signature(picked)
            if sig in seen:
                continue
            seen.add(sig)
            cards.append(_build_card(picked, size=size, joker=joker))
            break
        else:
            raise RuntimeError(
                "Unable to generate a unique card; try increasing the value pool or retry limits."
            )

    return cards
