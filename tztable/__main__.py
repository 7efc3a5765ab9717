"""Command line tool to create a table of DST transitions for a set of timezones.

Usage:
    python -m tztable <start_year> <end_year> [--zone-list PATH] [--output-dir DIR]

A set of tab separated ASCII encoded files is written that can be combined as
needed. Each line holds a distinct period with a specific UTC offset, with
transition times in local time (from-until).
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from .config import DEFAULT_ZONE_LIST, TableConfig, load_zone_keys
from .table import (
    DST_WITHOUT_TRANSITIONS_LIST,
    MIXED_DST_TABLE,
    NOT_FOUND_LIST,
    SINGLE_DST_TABLE,
    TIMEZONE_TABLE,
    WITHOUT_DST_LIST,
    build_table,
    write_tables,
)

_LOGGER = logging.getLogger(__name__)

_BANNER = """\
Timezone DST transition table generator
=======================================
Creates a table containing the exact DST dates and times for a set of timezones.
A set of tab separated ASCII encoded files is written that can be combined as needed.
Each line holds a distinct period with a specific UTC offset, with transition
times in local time (from-until).
"""

_DESCRIPTIONS = {
    TIMEZONE_TABLE: "timezones with start and end transition",
    SINGLE_DST_TABLE: "timezones with just one DST transition for all years",
    MIXED_DST_TABLE: "timezones that mix years of one and two DST transitions",
    DST_WITHOUT_TRANSITIONS_LIST: "timezones with DST but no transitions",
    WITHOUT_DST_LIST: "timezones without DST",
    NOT_FOUND_LIST: "timezones not found",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tztable",
        description=(
            "Create a table containing the exact DST transition dates and "
            "times for a set of timezones."
        ),
    )
    parser.add_argument("start_year", type=int, help="first year of the table")
    parser.add_argument("end_year", type=int, help="last year of the table")
    parser.add_argument(
        "--zone-list",
        type=pathlib.Path,
        default=DEFAULT_ZONE_LIST,
        help="file with one timezone per line (default: %(default)s, "
        "every available timezone when missing)",
    )
    parser.add_argument(
        "--output-dir",
        type=pathlib.Path,
        default=pathlib.Path("."),
        help="directory to write the table files to (default: current directory)",
    )
    parser.add_argument(
        "--edges",
        action="store_true",
        help="add ranges before the first and after the last transition",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        default="WARNING",
        help="set logging level (default: %(default)s)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the table generator and return the exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(message)s")
    print(_BANNER)

    try:
        config = TableConfig(
            start_year=args.start_year,
            end_year=args.end_year,
            output_dir=args.output_dir,
            zone_list=args.zone_list,
            include_edges=args.edges,
        )
    except ValidationError as err:
        messages = "; ".join(error["msg"] for error in err.errors())
        parser.error(messages)

    _LOGGER.debug("Using configuration %s", config)
    keys = load_zone_keys(config.zone_list)
    print(
        f"Creating timezone transition table from {config.start_year} to "
        f"{config.end_year} for {len(keys)} timezones...",
        end="",
        flush=True,
    )
    table = build_table(keys, config.start_year, config.end_year)
    print("Done\n")
    counts = write_tables(table, config.output_dir, include_edges=config.include_edges)
    for name, count in counts.items():
        print(f"{count} {_DESCRIPTIONS[name]} written to file {name}")
    print(f"\n{table.total} zones processed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
