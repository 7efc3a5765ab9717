"""Library for creating tables of DST transitions for a set of timezones.

The transitions of a zone are found from its adjustment rules, reshaped into
ranges in which a single UTC offset holds, and written as tab separated text.
"""

__all__ = [
    "config",
    "exceptions",
    "export",
    "finder",
    "model",
    "ranges",
    "rules",
    "table",
    "tzif",
    "zones",
]
