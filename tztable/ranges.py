"""Library for turning yearly transition pairs into validity ranges.

Each year of a zone contributes a pair of transitions: the start and end of
daylight savings time. The period between the end of one year's pair and the
start of the next year's pair is a range too (standard time), so it is
bridged in between:

    (S1, E1), (S2, E2)  ->  (S1, E1), (E1, S2), (S2, E2)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .model import TransitionInstant, ValidityRange, YearTransitionPair

__all__ = [
    "to_ranges",
    "zone_ranges",
]


def zone_ranges(
    pairs: Sequence[YearTransitionPair], include_edges: bool = False
) -> list[ValidityRange]:
    """Return the validity ranges for the transition pairs of a single zone.

    When `include_edges` is set, open ended ranges are added for the period
    before the first transition and after the last transition.
    """
    ranges: list[ValidityRange] = []
    previous_end: TransitionInstant | None = None
    for pair in pairs:
        if previous_end is not None:
            ranges.append(ValidityRange(previous_end, pair.start))
        ranges.append(ValidityRange(pair.start, pair.end))
        previous_end = pair.end

    if include_edges and pairs:
        ranges.insert(0, ValidityRange(None, pairs[0].start))
        if (last_end := pairs[-1].end) is not None:
            ranges.append(ValidityRange(last_end, None))
    return ranges


def to_ranges(
    zones: Mapping[str, Sequence[YearTransitionPair]] | None,
    include_edges: bool = False,
) -> dict[str, list[ValidityRange]]:
    """Transform the transition pairs of every zone into validity ranges.

    Every zone is kept in the result, including zones without any pairs.
    """
    if zones is None:
        raise ValueError("Zones to transform into ranges cannot be None")
    return {
        key: zone_ranges(pairs, include_edges=include_edges)
        for key, pairs in zones.items()
    }
