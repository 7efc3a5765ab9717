"""Adjustment rules describing when a timezone changes its UTC offset.

A zone is described by a small number of adjustment rules, each valid for
an inclusive range of years. Every adjustment rule has a rule for when
daylight savings time starts and a rule for when it ends, and each of those
is expressed in one of two ways:

  - A fixed date: The same month and day every year, e.g. March 21st.
  - A floating date: The n-th occurrence of a weekday in a month, e.g. the
    last Sunday of October. Week 5 means the last occurrence of the weekday
    in the month, which is the 4th occurrence when there is no 5th.

Fixed date rules resolve to midnight of that date and ignore the time of
day. Floating date rules resolve with the time of day applied.
"""

from __future__ import annotations

import calendar
import datetime
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

__all__ = [
    "AdjustmentRule",
    "FixedDateRule",
    "FloatingDateRule",
    "TransitionRule",
    "covered_spans",
    "find_adjustment_rule",
    "resolve_transition_date",
]

_DAYS_IN_WEEK = 7
_ZERO = datetime.timedelta(0)


def _weekday_code(value: datetime.date) -> int:
    """Return the day of the week between 0 (Sunday) and 6 (Saturday)."""
    return value.isoweekday() % _DAYS_IN_WEEK


@dataclass(frozen=True)
class FixedDateRule:
    """A transition on the same calendar date every year."""

    month: int
    """A month between 1 and 12."""

    day: int
    """A day of the month between 1 and 31."""

    time: datetime.timedelta = _ZERO
    """Time of day of the transition, not applied when resolving the date."""

    def __post_init__(self) -> None:
        """Validate the month and day."""
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12: {self.month}")
        if not 1 <= self.day <= 31:
            raise ValueError(f"Day must be between 1 and 31: {self.day}")

    def resolve(self, year: int) -> datetime.datetime:
        """Return the transition date for the specified year at midnight."""
        return datetime.datetime(year, self.month, self.day)


@dataclass(frozen=True)
class FloatingDateRule:
    """A transition on the n-th occurrence of a weekday within a month."""

    month: int
    """A month between 1 and 12."""

    week_of_month: int
    """A week number of the month (1 to 5) based on the first occurrence of day_of_week."""

    day_of_week: int
    """A day of the week between 0 (Sunday) and 6 (Saturday)."""

    time: datetime.timedelta = _ZERO
    """Offset of time from local midnight when the rule goes into effect."""

    def __post_init__(self) -> None:
        """Validate the month, week and day of the week."""
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12: {self.month}")
        if not 1 <= self.week_of_month <= 5:
            raise ValueError(
                f"Week of month must be between 1 and 5: {self.week_of_month}"
            )
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(
                f"Day of week must be between 0 and 6: {self.day_of_week}"
            )

    def resolve(self, year: int) -> datetime.datetime:
        """Return the transition date and time for the specified year."""
        # The 3rd week starts no earlier than the 15th of the month
        start_of_week = self.week_of_month * _DAYS_IN_WEEK - 6
        first_day_of_week = _weekday_code(datetime.date(year, self.month, 1))
        if first_day_of_week <= self.day_of_week:
            day = start_of_week + (self.day_of_week - first_day_of_week)
        else:
            day = start_of_week + (_DAYS_IN_WEEK - first_day_of_week + self.day_of_week)
        # Months with no fifth occurrence use the fourth
        if day > calendar.monthrange(year, self.month)[1]:
            day -= _DAYS_IN_WEEK
        return datetime.datetime(year, self.month, day) + self.time


TransitionRule = Union[FixedDateRule, FloatingDateRule]


def resolve_transition_date(rule: TransitionRule, year: int) -> datetime.datetime:
    """Return the local date and time the rule takes effect in the year."""
    return rule.resolve(year)


@dataclass(frozen=True)
class AdjustmentRule:
    """Daylight savings time start and end rules for a range of years."""

    start_year: int
    """First year the rule is in effect."""

    end_year: int
    """Last year the rule is in effect, inclusive."""

    daylight_start: TransitionRule
    """Describes when dst goes into effect."""

    daylight_end: TransitionRule
    """Describes when dst ends (std starts)."""

    def __post_init__(self) -> None:
        """Validate the year range."""
        if self.start_year > self.end_year:
            raise ValueError(
                f"Adjustment rule start year {self.start_year} is after end year {self.end_year}"
            )

    def covers(self, year: int) -> bool:
        """Return True if the rule is in effect for the year."""
        return self.start_year <= year <= self.end_year


def find_adjustment_rule(
    rules: Iterable[AdjustmentRule], year: int
) -> AdjustmentRule | None:
    """Return the first adjustment rule in effect for the year, if any."""
    for rule in rules:
        if rule.covers(year):
            return rule
    return None


def covered_spans(
    rules: Iterable[AdjustmentRule], start_year: int, end_year: int
) -> list[tuple[int, int]]:
    """Return the inclusive year spans within the window covered by rules.

    Rules for consecutive years are merged into a single span, so a new span
    only starts after a year that no rule covers.
    """
    spans: list[tuple[int, int]] = []
    for rule in rules:
        first = max(rule.start_year, start_year)
        last = min(rule.end_year, end_year)
        if first > last:
            continue
        if spans and spans[-1][1] + 1 >= first:
            spans[-1] = (spans[-1][0], max(spans[-1][1], last))
        else:
            spans.append((first, last))
    return spans
