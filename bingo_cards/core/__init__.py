"""
Core modules (cards, layout, font fitting, joker raster, PDF renderer, generator).

Avoid importing heavy dependencies at package import time; import submodules directly:
- `bingo_cards.core.cards`
- `bingo_cards.core.generator`
- `bingo_cards.core.pdf`
"""

__all__ = []
