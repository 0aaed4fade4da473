from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from bingo_cards.core.cards import Card
from bingo_cards.core.generator import generate_cards, number_pool
from bingo_cards.core.layout import layout_from_env
from bingo_cards.core.parser import parse_deck_json, parse_strings_text
from bingo_cards.core.pdf import page_count, render_cards_pdf


SCRIPT_DIR = Path(__file__).resolve().parent


def _import_load_dotenv():
    try:
        from dotenv import load_dotenv
    except ModuleNotFoundError as exc:  # pragma: no cover - depends on local env
        raise RuntimeError(
            "Missing dependency: python-dotenv.\n"
            "Install it with:\n"
            "  python3 -m pip install -e ."
        ) from exc
    return load_dotenv


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render bingo cards to a landscape PDF, four per page.")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--deck", type=Path, help="JSON file with a list of cards (lists of columns)")
    source.add_argument("--numbers", nargs=2, type=int, metavar=("MIN", "MAX"), help="Generate cards from a number range")
    source.add_argument("--strings", type=Path, help="Generate cards from a text file, one value per line")
    parser.add_argument("--size", type=int, default=5, help="Columns and rows per card (default: 5)")
    parser.add_argument("--count", type=int, default=4, help="Number of cards to generate (default: 4)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible cards")
    parser.add_argument("--unordered", action="store_true", help="Do not sort values on each card")
    parser.add_argument("--joker-svg", type=Path, help="SVG image for the joker cell; enables the joker when generating")
    parser.add_argument("--output", type=Path, default=None, help="Output PDF path (default: BINGO_OUTPUT_FILENAME or bingo-cards.pdf)")
    return parser.parse_args(argv)


def _load_cards(args: argparse.Namespace) -> list[Card]:
    if args.deck:
        return parse_deck_json(args.deck.read_text(encoding="utf-8"))

    if args.strings:
        parsed = parse_strings_text(args.strings.read_text(encoding="utf-8"))
        if parsed.ignored_lines:
            logging.info("Ignored %s entr(ies) in %s", len(parsed.ignored_lines), args.strings)
        pool = parsed.values
    else:
        minimum, maximum = args.numbers or (0, 100)
        pool = number_pool(minimum, maximum)

    return generate_cards(
        pool=pool,
        size=args.size,
        count=args.count,
        ordered=not args.unordered,
        joker=args.joker_svg is not None,
        seed=args.seed,
    )


def main(argv: list[str]) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    load_dotenv = _import_load_dotenv()
    load_dotenv(dotenv_path=SCRIPT_DIR / ".env")
    layout = layout_from_env()

    cards = _load_cards(args)
    joker_markup = args.joker_svg.read_text(encoding="utf-8") if args.joker_svg else None

    output = args.output or Path(layout.output_filename)
    render_cards_pdf(cards, layout=layout, joker_markup=joker_markup, path=output)
    print(f"Wrote {len(cards)} card(s) on {page_count(len(cards), layout.cards_per_page)} page(s) to {output}")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        raise SystemExit(130)
    except Exception as exc:
        msg = str(exc).rstrip() or repr(exc)
        if "\n" in msg:
            first, rest = msg.split("\n", 1)
            print(f"ERROR: {first}", file=sys.stderr)
            print(rest, file=sys.stderr)
        else:
            print(f"ERROR: {msg}", file=sys.stderr)
        raise SystemExit(2)
