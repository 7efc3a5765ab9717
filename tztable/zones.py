"""Library for describing a named timezone as a set of adjustment rules.

A TZif file describes a zone as a list of explicit transitions followed by
a POSIX TZ rule for everything after the last explicit transition. This is
turned into adjustment rules as follows:

  - Each year with explicit offset changes gets a fixed date rule valid for
    that year alone, starting on the date of the first change and ending on
    the date of the last change of the year (local time before the change).
  - The footer rule becomes a floating date rule valid from the first year
    of the trailing run of years whose explicit changes fall on the dates
    the footer rule predicts, through year 9999.

Fixed date rules resolve to midnight, so only the years covered by the
footer rule carry the exact time of day of a transition.
"""

from __future__ import annotations

import datetime
import io
import logging
import zoneinfo
from dataclasses import dataclass

from .rules import AdjustmentRule, FixedDateRule, TransitionRule
from .tzif import timezoneinfo
from .tzif.model import TimezoneInfo
from .tzif.tz_rule import PosixRule

__all__ = [
    "ZoneRules",
    "adjustment_rules",
    "load_zone_rules",
]

_LOGGER = logging.getLogger(__name__)

_MAX_YEAR = 9999
_ZERO = datetime.timedelta(0)
_EPOCH = datetime.datetime(1970, 1, 1)
_MIN_SECONDS = (datetime.datetime(1, 1, 2) - _EPOCH).total_seconds()
_MAX_SECONDS = (datetime.datetime(_MAX_YEAR, 12, 30) - _EPOCH).total_seconds()


@dataclass(frozen=True)
class ZoneRules:
    """Everything needed to find the transitions of a single zone."""

    key: str
    """The IANA identifier of the zone e.g. Europe/Amsterdam."""

    supports_dst: bool
    """Determines if the zone ever observes Daylight Savings Time."""

    adjustment_rules: tuple[AdjustmentRule, ...]
    """Non overlapping adjustment rules ordered by year."""

    tzinfo: datetime.tzinfo
    """Used to resolve the actual UTC offset of the zone."""

    def utc_offset(self, local: datetime.datetime) -> datetime.timedelta:
        """Return the UTC offset in effect at the UTC instant of a local time."""
        utc = local.replace(tzinfo=self.tzinfo).astimezone(datetime.timezone.utc)
        return utc.astimezone(self.tzinfo).utcoffset() or _ZERO


def _local_changes(info: TimezoneInfo) -> dict[int, list[datetime.datetime]]:
    """Return the local time of each offset change, grouped by year.

    The local time is expressed in the offset in effect before the change.
    """
    years: dict[int, list[datetime.datetime]] = {}
    previous_utoff = info.initial_utoff
    for transition in info.transitions:
        utoff, previous_utoff = previous_utoff, transition.utoff
        if transition.utoff == utoff:
            continue
        seconds = transition.transition_time + utoff
        if not _MIN_SECONDS <= seconds <= _MAX_SECONDS:
            continue
        local = _EPOCH + datetime.timedelta(seconds=seconds)
        years.setdefault(local.year, []).append(local)
    return years


def _footer_rules(
    rule: PosixRule | None,
) -> tuple[TransitionRule, TransitionRule] | None:
    """Return the start and end rules of the footer if it observes DST.

    A footer with negative DST (e.g. Europe/Dublin, where standard time is
    the summer time) is swapped so the start is the change to summer time.
    """
    if rule is None or rule.dst_start is None or rule.dst_end is None:
        return None
    if rule.dst_offset is not None and rule.dst_offset < rule.std_offset:
        return (rule.dst_end, rule.dst_start)
    return (rule.dst_start, rule.dst_end)


def _footer_start_year(
    years: dict[int, list[datetime.datetime]],
    dst_start: TransitionRule,
    dst_end: TransitionRule,
) -> int:
    """Return the first year from which the footer rule describes the zone."""
    start_year = max(years, default=0) + 1
    for year in sorted(years, reverse=True):
        expected = {
            dst_start.resolve(year).date(),
            dst_end.resolve(year).date(),
        }
        if {local.date() for local in years[year]} != expected:
            break
        start_year = year
    return start_year


def _time_of_day(value: datetime.datetime) -> datetime.timedelta:
    return value - value.replace(hour=0, minute=0, second=0, microsecond=0)


def _fixed_date_rule(value: datetime.datetime) -> FixedDateRule:
    return FixedDateRule(month=value.month, day=value.day, time=_time_of_day(value))


def adjustment_rules(info: TimezoneInfo) -> list[AdjustmentRule]:
    """Build the ordered adjustment rules for the parsed TZif data."""
    years = _local_changes(info)
    footer = _footer_rules(info.rule)
    footer_start = _MAX_YEAR + 1
    if footer is not None:
        footer_start = _footer_start_year(years, *footer)

    rules = [
        AdjustmentRule(
            start_year=year,
            end_year=year,
            daylight_start=_fixed_date_rule(changes[0]),
            daylight_end=_fixed_date_rule(changes[-1]),
        )
        for year, changes in years.items()
        if year < footer_start
    ]
    if footer is not None and footer_start <= _MAX_YEAR:
        rules.append(
            AdjustmentRule(
                start_year=footer_start,
                end_year=_MAX_YEAR,
                daylight_start=footer[0],
                daylight_end=footer[1],
            )
        )
    return rules


def load_zone_rules(key: str) -> ZoneRules:
    """Load the adjustment rules and offsets for the named zone.

    Raises TimezoneInfoError when the zone does not exist or its data can't
    be read.
    """
    info = timezoneinfo.read(key)
    tzinfo = zoneinfo.ZoneInfo.from_file(
        io.BytesIO(timezoneinfo.read_bytes(key)), key=key
    )
    rules = adjustment_rules(info)
    supports_dst = info.dst_types or (info.rule is not None and info.rule.has_dst)
    _LOGGER.debug(
        "Timezone %s has %d adjustment rules (dst=%s)", key, len(rules), supports_dst
    )
    return ZoneRules(
        key=key,
        supports_dst=supports_dst,
        adjustment_rules=tuple(rules),
        tzinfo=tzinfo,
    )
