"""Library for finding the DST transitions of a zone within a range of years.

Transitions are found by walking a cursor forward from the start of the
first year. At each step the adjustment rule in effect for the year of the
cursor determines the next start or end of daylight savings time at or after
the cursor. The cursor then moves one day past the transition found and the
search repeats until the rules run out or the last year is passed.

The UTC offset before and after a transition is not known from the rules
alone, so it is resolved from the zone 6 hours before and 6 hours after the
transition. This avoids asking for the offset exactly at the ambiguous or
skipped local time of the transition itself.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable, Sequence

from .exceptions import TransitionError
from .model import TransitionInstant, YearTransitionPair
from .rules import AdjustmentRule, find_adjustment_rule, resolve_transition_date

__all__ = [
    "OffsetResolver",
    "find_transitions",
    "next_transition",
    "pair_by_year",
]

_LOGGER = logging.getLogger(__name__)

OffsetResolver = Callable[[datetime.datetime], datetime.timedelta]
"""Returns the UTC offset of a zone for a naive local datetime."""

_OFFSET_PROBE = datetime.timedelta(hours=6)
_CURSOR_STEP = datetime.timedelta(days=1)


def next_transition(
    as_of: datetime.datetime, rules: Sequence[AdjustmentRule]
) -> datetime.datetime | None:
    """Return the next transition at or after the specified local time.

    Returns None when no adjustment rule covers the year of `as_of`, in
    which case there are no further transitions.

    Once both transitions of the year have passed, the start of DST in the
    next year is returned. That start comes from the rule covering the next
    year, and None is returned when there is no such rule. The previous
    year's rule is never carried over into a year it does not cover.
    """
    if not rules:
        return None

    year = as_of.year
    if (adjustment := find_adjustment_rule(rules, year)) is None:
        return None

    dst_start = resolve_transition_date(adjustment.daylight_start, year)
    if dst_start >= as_of:
        return dst_start
    dst_end = resolve_transition_date(adjustment.daylight_end, year)
    if dst_end >= as_of:
        return dst_end

    # Both transitions of this year have passed, use next year's start
    year += 1
    if (adjustment := find_adjustment_rule(rules, year)) is None:
        return None
    dst_start = resolve_transition_date(adjustment.daylight_start, year)
    if dst_start < as_of:
        raise TransitionError(
            f"Start of daylight savings time in {year} ({dst_start}) is before {as_of}"
        )
    return dst_start


def _transition_instant(
    transition: datetime.datetime, offset_resolver: OffsetResolver
) -> TransitionInstant:
    """Resolve the UTC offsets before and after a transition."""
    return TransitionInstant(
        local_datetime=transition,
        old_utc_offset=offset_resolver(transition - _OFFSET_PROBE),
        new_utc_offset=offset_resolver(transition + _OFFSET_PROBE),
    )


def pair_by_year(
    transitions: Sequence[TransitionInstant],
) -> list[YearTransitionPair]:
    """Group transitions by year and return the first and last of each year.

    A year with a single transition results in a pair with the same instant
    as both the start and the end.
    """
    years: dict[int, list[TransitionInstant]] = {}
    for transition in transitions:
        years.setdefault(transition.local_datetime.year, []).append(transition)
    return [
        YearTransitionPair(start=group[0], end=group[-1]) for group in years.values()
    ]


def find_transitions(
    start_year: int,
    end_year: int,
    rules: Sequence[AdjustmentRule],
    offset_resolver: OffsetResolver,
) -> list[YearTransitionPair]:
    """Find all transitions between the start and end year (inclusive).

    The result has one entry for each year that has at least one transition,
    in chronological order.
    """
    if start_year > end_year:
        raise ValueError(f"Start year {start_year} is after end year {end_year}")

    cursor = datetime.datetime(start_year, 1, 1)
    transitions: list[TransitionInstant] = []
    found = next_transition(cursor, rules)
    if found is None:
        _LOGGER.debug("No transition found on or after %s", cursor)
        return []
    while found is not None and found.year <= end_year:
        _LOGGER.debug("Found transition at %s", found)
        transitions.append(_transition_instant(found, offset_resolver))
        found = next_transition(found + _CURSOR_STEP, rules)

    return pair_by_year(transitions)
