"""Data model for the tzif library."""

from dataclasses import dataclass, field
from typing import Optional

from .tz_rule import PosixRule


@dataclass(frozen=True)
class Transition:
    """An individual transition in the Datablock."""

    transition_time: int
    """Seconds since the epoch (UTC) at which the rules for computing local time change."""

    utoff: int
    """Number of seconds added to UTC to determine local time."""

    dst: bool
    """Determines if local time is Daylight Savings Time (else Standard time)."""


@dataclass(frozen=True)
class TimezoneInfo:
    """The results of parsing the TZif file."""

    transitions: list[Transition]
    """Local time changes."""

    initial_utoff: int = 0
    """Number of seconds added to UTC to determine local time before the first transition."""

    dst_types: bool = False
    """Determines if any local time type of the zone is Daylight Savings Time."""

    rule: Optional[PosixRule] = field(default=None)
    """A rule for computing local time changes after the last transition."""
