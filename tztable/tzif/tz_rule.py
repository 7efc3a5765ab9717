"""Library for parsing TZ rules.

The footer of a TZif file contains a POSIX TZ string that describes the
transitions after the last explicit transition in the file. TZ supports
these two formats:

No DST: std offset
  - std: Name of the timezone
  - offset: Time added to local time to get UTC
  Example: EST+5

DST: std offset dst [offset],start[/time],end[/time]
  - dst: Name of the Daylight savings time timezone
  - offset: Defaults to 1 hour ahead of STD offset if not specified
  - start & end: Time period when DST is in effect. The start/end have
    the following formats:
      Jn: A julian day between 1 and 365 (Feb 29th never counted)
      Mm.w.d:
          m: Month between 1 and 12
          d: Between 0 (Sunday) and 6 (Saturday)
          w: Between 1 and 5. Week 1 is first week d occurs
      The time field is in hh:mm:ss. The hour can be 167 to -167.

Mm.w.d dates become a FloatingDateRule and Jn dates a FixedDateRule.
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from typing import Any, Optional

from ..rules import FixedDateRule, FloatingDateRule, TransitionRule

__all__ = [
    "PosixRule",
    "parse_tz_rule",
]

_ZERO = datetime.timedelta(seconds=0)
_DEFAULT_TIME_DELTA = datetime.timedelta(hours=2)
_DEFAULT_DST_DELTA = datetime.timedelta(hours=1)

# Julian days never count Feb 29th, so map them onto a non-leap year
_NON_LEAP_YEAR_START = datetime.date(2001, 1, 1)


def _parse_time(values: dict[str, Any]) -> datetime.timedelta | None:
    """Convert an offset from [+/-]hh[:mm[:ss]] to a timedelta."""
    if (hour := values["hour"]) is None:
        return None
    sign = 1
    if hour.startswith("+"):
        hour = hour[1:]
    elif hour.startswith("-"):
        sign = -1
        hour = hour[1:]
    minutes = values.get("minutes") or "0"
    seconds = values.get("seconds") or "0"
    return datetime.timedelta(
        seconds=sign * (int(hour) * 60 * 60 + int(minutes) * 60 + int(seconds))
    )


@dataclass(frozen=True)
class PosixRule:
    """A rule for evaluating future timezone transitions."""

    std_name: str
    """The name of standard time e.g. EST."""

    std_offset: datetime.timedelta
    """UTC offset of standard time (not time added to local time)."""

    dst_name: Optional[str] = None
    """The name of daylight savings time e.g. EDT."""

    dst_offset: Optional[datetime.timedelta] = None
    """UTC offset of daylight savings time."""

    dst_start: Optional[TransitionRule] = None
    """Describes when dst goes into effect."""

    dst_end: Optional[TransitionRule] = None
    """Describes when dst ends (std starts)."""

    @property
    def has_dst(self) -> bool:
        """Return True if the rule observes daylight savings time."""
        return self.dst_name is not None


# Regexp for parsing the TZ string
_OFFSET_RE_PATTERN: re.Pattern[str] = re.compile(
    r"(?P<name>(\<[+\-]?\d+\>|[a-zA-Z]+))"  # name
    r"((?P<hour>[+-]?\d+)(?::(?P<minutes>\d{1,2})(?::(?P<seconds>\d{1,2}))?)?)?"  # offset
)
_START_END_RE_PATTERN = re.compile(
    # days in either julian (J prefix) or month.week.day (M prefix) format
    r",(J(?P<day_of_year>\d+)|M(?P<month>\d{1,2})\.(?P<week_of_month>\d)\.(?P<day_of_week>\d))"
    # time
    r"(\/(?P<hour>[+-]?\d+)(?::(?P<minutes>\d{1,2})(?::(?P<seconds>\d{1,2}))?)?)?"
)


def _utc_offset_from_match(match: re.Match[str]) -> datetime.timedelta | None:
    """Return the UTC offset from the time added to local time to get UTC."""
    if (value := _parse_time(match.groupdict())) is None:
        return None
    return _ZERO - value


def _transition_rule_from_match(match: re.Match[str]) -> TransitionRule:
    """Create a transition rule from a regex match."""
    time = _parse_time(match.groupdict())
    if time is None:
        time = _DEFAULT_TIME_DELTA
    if match["day_of_year"] is not None:
        day_of_year = int(match.group("day_of_year"))
        if not 1 <= day_of_year <= 365:
            raise ValueError(f"Julian day must be between 1 and 365: {day_of_year}")
        date = _NON_LEAP_YEAR_START + datetime.timedelta(days=day_of_year - 1)
        return FixedDateRule(month=date.month, day=date.day, time=time)
    return FloatingDateRule(
        month=int(match.group("month")),
        week_of_month=int(match.group("week_of_month")),
        day_of_week=int(match.group("day_of_week")),
        time=time,
    )


def parse_tz_rule(tz_str: str) -> PosixRule:
    """Parse the TZ string into a PosixRule object."""
    buffer = tz_str
    if (std_match := _OFFSET_RE_PATTERN.match(buffer)) is None:
        raise ValueError(f"Unable to parse TZ string: {tz_str}")
    buffer = buffer[std_match.end() :]
    if (dst_match := _OFFSET_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[dst_match.end() :]
    if (std_start := _START_END_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[std_start.end() :]
    if (std_end := _START_END_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[std_end.end() :]
    if (std_start is None) != (std_end is None):
        raise ValueError(
            f"Unable to parse TZ string, should have both or neither start and end dates: {tz_str}"
        )
    if buffer:
        raise ValueError(
            f"Unable to parse TZ string, unexpected trailing data: {tz_str}"
        )

    std_offset = _utc_offset_from_match(std_match) or _ZERO
    dst_name: str | None = None
    dst_offset: datetime.timedelta | None = None
    if dst_match is not None:
        dst_name = dst_match.group("name")
        # If the dst offset is omitted, it defaults to one hour ahead of standard time.
        dst_offset = _utc_offset_from_match(dst_match)
        if dst_offset is None:
            dst_offset = std_offset + _DEFAULT_DST_DELTA
    return PosixRule(
        std_name=std_match.group("name"),
        std_offset=std_offset,
        dst_name=dst_name,
        dst_offset=dst_offset,
        dst_start=_transition_rule_from_match(std_start) if std_start else None,
        dst_end=_transition_rule_from_match(std_end) if std_end else None,
    )
