"""``mpsparse PATH``: parse an MPS file and print what it contains."""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from mpsparse.document import Document
from mpsparse.errors import MpsError
from mpsparse.model import build_model
from mpsparse.parse import parse

logger = logging.getLogger(__name__)

_OPTIONAL_SECTIONS = (
    "rhs",
    "ranges",
    "bounds",
    "user_cuts",
    "special_ordered_sets",
    "quadratic_objective",
    "quadratic_constraints",
    "cone_constraints",
    "indicators",
    "lazy_constraints",
    "branch_priorities",
)


def build_parser() -> argparse.ArgumentParser:
    """Command line of ``mpsparse``: a path plus output switches."""
    parser = argparse.ArgumentParser(
        prog="mpsparse",
        description="Parse an MPS file and summarize its sections.",
    )
    parser.add_argument("path", type=Path, help="MPS file to read")
    parser.add_argument(
        "--located",
        action="store_true",
        help="record line and column of every record",
    )
    parser.add_argument(
        "--model",
        action="store_true",
        help="also validate cross references and print model sizes",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug records")
    return parser


def summarize(document: Document) -> list[str]:
    """One line per section that is present in ``document``."""
    lines = [
        f"NAME {document.name}",
        f"ROWS {len(document.rows)}",
        f"COLUMNS {len(document.columns)} lines, {len(document.column_names)} columns",
    ]
    if document.integer_columns:
        lines.append(f"integer columns {len(document.integer_columns)}")
    if document.objective_sense is not None:
        lines.append(f"OBJSENSE {document.objective_sense.value}")
    for attribute in _OPTIONAL_SECTIONS:
        records = getattr(document, attribute)
        if records is not None:
            lines.append(f"{attribute.upper()} {len(records)}")
    return lines


def main(argv: Sequence[str] | None = None) -> int:
    """Print a section summary of one MPS file.

    Returns:
        0 on success, 1 when the file cannot be read, parsed or modelled
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        text = args.path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("cannot read %s: %s", args.path, exc)
        return 1
    try:
        document = parse(text, located=args.located)
        for line in summarize(document):
            print(line)
        if args.model:
            model = build_model(document)
            print(f"coefficients {len(model.values)}")
            print(f"rhs entries {len(model.rhs)}")
            print(f"bound entries {len(model.bounds)}")
    except MpsError as exc:
        logger.error("%s: %s", args.path, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
