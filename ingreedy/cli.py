#!/usr/bin/env python3
"""
Command-line front end.

    ingreedy "2 (28 ounce) cans crushed tomatoes"
    ingreedy --tree "1-1/2 ounce vanilla ice cream"

Prints the parsed record as JSON (or the parse tree with --tree) and exits 0;
on a parse failure prints the error to stderr and exits 1.
"""

from __future__ import annotations

from typing import List, Optional
import argparse
import logging
import sys

from ingreedy.config import SETTINGS
from ingreedy.contracts import record_to_json
from ingreedy.errors import IngredientSyntaxError, IngreedyError
from ingreedy.ingredient import parse_ingredient
from ingreedy.parsers.ingredient_grammar import parse_tree


def _report(err: IngreedyError) -> None:
    if isinstance(err, IngredientSyntaxError):
        print(f"[ERR] {err.pretty()}", file=sys.stderr)
    else:
        print(f"[ERR] {err}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="ingreedy",
        description="Parse a recipe ingredient line into quantities and an ingredient name.",
    )
    ap.add_argument("input", help='Ingredient line, e.g. "1 1/2 cups flour"')
    ap.add_argument("--compact", action="store_true", help="Print JSON on a single line")
    ap.add_argument("--tree", action="store_true", help="Print the grammar parse tree instead of JSON")
    ap.add_argument("--log-level", default=SETTINGS.log_level, help="Logging level (default: %(default)s)")
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.tree:
            tree = parse_tree(
                args.input,
                max_input_length=SETTINGS.max_input_length,
                max_nesting_depth=SETTINGS.max_nesting_depth,
            )
            print(tree.pretty())
            return 0
        record = parse_ingredient(args.input)
    except IngreedyError as e:
        _report(e)
        return 1

    print(record_to_json(record, indent=None if args.compact else 2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
