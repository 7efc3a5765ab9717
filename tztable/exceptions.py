"""Exceptions for tztable library."""


class TimezoneTableError(Exception):
    """Base exception for all tztable errors."""


class TimezoneInfoError(TimezoneTableError):
    """Raised when timezone data for a key can't be found or read."""


class TransitionError(TimezoneTableError):
    """Exception raised when evaluating the adjustment rules of a zone.

    The next transition is always expected to be at or after the point in
    time it was searched from. A rule set that resolves a transition before
    that point (for example a floating rule with a negative time of day
    that spills into the previous year) is reported with this exception.
    """


class RangeError(TimezoneTableError):
    """Exception raised when a validity range has neither a start nor an end."""
