"""Data model for transitions and the ranges built from them."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Optional

__all__ = [
    "TransitionInstant",
    "YearTransitionPair",
    "ValidityRange",
]


@dataclass(frozen=True)
class TransitionInstant:
    """A single change of the UTC offset of a zone."""

    local_datetime: datetime.datetime
    """Wall clock local time at which the change happens (not UTC)."""

    old_utc_offset: datetime.timedelta
    """UTC offset in effect before the change."""

    new_utc_offset: datetime.timedelta
    """UTC offset in effect after the change."""


@dataclass(frozen=True)
class YearTransitionPair:
    """The first and last transition found within a single calendar year.

    When a year only has a single transition both `start` and `end` refer to
    the same instant. This is not a range and serializes to nothing.
    """

    start: TransitionInstant
    """The chronologically first transition of the year."""

    end: Optional[TransitionInstant] = None
    """The chronologically last transition of the year."""

    def __post_init__(self) -> None:
        """Verify the pair has a start."""
        if self.start is None:
            raise ValueError("Start of a year transition pair cannot be None")

    @property
    def is_degenerate(self) -> bool:
        """Return True if the year only had a single transition."""
        return self.start == self.end


@dataclass(frozen=True)
class ValidityRange:
    """A contiguous period in which one UTC offset regime holds.

    A range is bounded by the transition that opened it and the transition
    that closed it. Either bound may be absent for a range that extends past
    the edge of the analyzed years, but never both.
    """

    valid_from: Optional[TransitionInstant] = None
    """Transition that opened the range."""

    valid_until: Optional[TransitionInstant] = None
    """Transition that closed the range."""
