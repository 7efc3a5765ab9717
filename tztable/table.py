"""Library for building and writing the transition table of many zones.

Every zone ends up in exactly one of six categories, each written to its own
file:

  - Zones with two distinct transitions every year.
  - Zones with exactly one transition every year.
  - Zones that mix years of one and two transitions.
  - Zones that observe DST but have no transitions in the years requested.
  - Zones that never observe DST.
  - Zones that could not be found.

Zones are processed independently, and a zone that fails to load never
stops the processing of the remaining zones.
"""

from __future__ import annotations

import logging
import pathlib
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from .exceptions import TimezoneInfoError, TransitionError
from .export import write_ranges, write_zone_list
from .finder import find_transitions
from .model import YearTransitionPair
from .rules import covered_spans
from .zones import ZoneRules, load_zone_rules

__all__ = [
    "TIMEZONE_TABLE",
    "SINGLE_DST_TABLE",
    "MIXED_DST_TABLE",
    "DST_WITHOUT_TRANSITIONS_LIST",
    "WITHOUT_DST_LIST",
    "NOT_FOUND_LIST",
    "TransitionTable",
    "build_table",
    "write_tables",
]

_LOGGER = logging.getLogger(__name__)

TIMEZONE_TABLE = "Timezone.csv"
SINGLE_DST_TABLE = "TimezonesWithOneDSTTime.csv"
MIXED_DST_TABLE = "TimezonesWithOneOrTwoDSTTime.csv"
DST_WITHOUT_TRANSITIONS_LIST = "TimezonesWithDSTButNoTransitions.csv"
WITHOUT_DST_LIST = "TimezonesWithoutDST.csv"
NOT_FOUND_LIST = "TimezonesNotFound.csv"

_ENCODING = "ascii"

ZoneLoader = Callable[[str], ZoneRules]

ZoneTransitions = dict[str, list[YearTransitionPair]]


def _has_two_transitions(pair: YearTransitionPair) -> bool:
    """Return True if the year has a distinct start and end of DST."""
    if pair.end is None:
        return True
    return (
        pair.start.local_datetime != pair.end.local_datetime
        and pair.start.old_utc_offset != pair.end.old_utc_offset
    )


def _zone_transitions(
    zone: ZoneRules, start_year: int, end_year: int
) -> list[YearTransitionPair]:
    """Find the transitions of a zone in every span of years covered by its rules.

    The search for transitions ends at the first year without a rule, so it
    is started again at the beginning of each covered span.
    """
    pairs: list[YearTransitionPair] = []
    for first, last in covered_spans(zone.adjustment_rules, start_year, end_year):
        _LOGGER.debug("Timezone %s: searching %d to %d", zone.key, first, last)
        pairs.extend(
            find_transitions(first, last, zone.adjustment_rules, zone.utc_offset)
        )
    return pairs


@dataclass
class TransitionTable:
    """The transitions of every zone that has them, and the zones that don't."""

    zones: ZoneTransitions = field(default_factory=dict)
    """Transition pairs for each zone with at least one transition."""

    dst_without_transitions: list[str] = field(default_factory=list)
    """Zones that observe DST but have no transitions in the requested years."""

    without_dst: list[str] = field(default_factory=list)
    """Zones that never observe DST."""

    not_found: list[str] = field(default_factory=list)
    """Zones that could not be loaded."""

    @property
    def two_transitions(self) -> ZoneTransitions:
        """Zones with a distinct start and end of DST in every year."""
        return {
            key: pairs
            for key, pairs in self.zones.items()
            if all(_has_two_transitions(pair) for pair in pairs)
        }

    @property
    def single_transition(self) -> ZoneTransitions:
        """Zones with exactly one transition in every year."""
        return {
            key: pairs
            for key, pairs in self.zones.items()
            if not all(_has_two_transitions(pair) for pair in pairs)
            and all(pair.is_degenerate for pair in pairs)
        }

    @property
    def mixed_transitions(self) -> ZoneTransitions:
        """Zones with one transition in some years and two in others."""
        return {
            key: pairs
            for key, pairs in self.zones.items()
            if not all(_has_two_transitions(pair) for pair in pairs)
            and not all(pair.is_degenerate for pair in pairs)
        }

    @property
    def total(self) -> int:
        """Return the number of zones processed."""
        return (
            len(self.zones)
            + len(self.dst_without_transitions)
            + len(self.without_dst)
            + len(self.not_found)
        )


def build_table(
    keys: Iterable[str],
    start_year: int,
    end_year: int,
    loader: ZoneLoader = load_zone_rules,
) -> TransitionTable:
    """Find the transitions of every zone and sort zones into categories."""
    table = TransitionTable()
    for key in keys:
        try:
            zone = loader(key)
        except TimezoneInfoError as err:
            _LOGGER.debug("Timezone %s: Not found (%s)", key, err)
            table.not_found.append(key)
            continue

        if not zone.supports_dst:
            _LOGGER.debug("Timezone %s has no DST", key)
            table.without_dst.append(key)
            continue

        _LOGGER.debug("Timezone %s has DST, getting the transitions", key)
        try:
            pairs = _zone_transitions(zone, start_year, end_year)
        except TransitionError as err:
            _LOGGER.error("Unable to find transitions for timezone %s: %s", key, err)
            table.not_found.append(key)
            continue

        if not pairs:
            table.dst_without_transitions.append(key)
        else:
            table.zones[key] = pairs
    return table


def _write_table(
    path: pathlib.Path, zones: ZoneTransitions, include_edges: bool
) -> int:
    with path.open("w", encoding=_ENCODING, newline="") as output:
        write_ranges(output, zones, include_edges=include_edges)
    return len(zones)


def _write_list(path: pathlib.Path, keys: Sequence[str]) -> int:
    with path.open("w", encoding=_ENCODING, newline="") as output:
        return write_zone_list(output, keys)


def write_tables(
    table: TransitionTable,
    output_dir: pathlib.Path,
    include_edges: bool = False,
) -> dict[str, int]:
    """Write all six files and return the number of zones in each file."""
    output_dir.mkdir(parents=True, exist_ok=True)
    counts = {
        TIMEZONE_TABLE: _write_table(
            output_dir / TIMEZONE_TABLE, table.two_transitions, include_edges
        ),
        SINGLE_DST_TABLE: _write_table(
            output_dir / SINGLE_DST_TABLE, table.single_transition, include_edges
        ),
        MIXED_DST_TABLE: _write_table(
            output_dir / MIXED_DST_TABLE, table.mixed_transitions, include_edges
        ),
        DST_WITHOUT_TRANSITIONS_LIST: _write_list(
            output_dir / DST_WITHOUT_TRANSITIONS_LIST, table.dst_without_transitions
        ),
        WITHOUT_DST_LIST: _write_list(
            output_dir / WITHOUT_DST_LIST, table.without_dst
        ),
        NOT_FOUND_LIST: _write_list(output_dir / NOT_FOUND_LIST, table.not_found),
    }
    for name, count in counts.items():
        _LOGGER.debug("Wrote %d zones to %s", count, name)
    return counts
