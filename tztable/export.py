"""Library for serializing validity ranges as tab separated text.

Each range is written as one row:

    <timezone>  <current offset>  <valid from>  <new offset>  <valid until>

The valid from and valid until columns hold the local time of the transition
followed by the UTC offset in effect before it, e.g. 2022-03-27T02:00:00+1:00:00.
Ranges that start and end at the same instant carry no information and are
not written.

UTC offsets are written as [-]H:MM:SS with the hours not padded, e.g.
2:00:00, 10:00:00 and -5:00:00. Tools expecting two digit hours
(02:00:00) need to pad them when reading the files.
"""

from __future__ import annotations

import csv
import datetime
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import TextIO

from .exceptions import RangeError
from .model import TransitionInstant, ValidityRange, YearTransitionPair
from .ranges import to_ranges

__all__ = [
    "HEADER",
    "format_offset",
    "format_timestamp",
    "iter_rows",
    "write_ranges",
    "write_zone_list",
]

_LOGGER = logging.getLogger(__name__)

HEADER = ("timezone", "current_offset", "valid_from", "new_offset", "valid_until")

_ZERO = datetime.timedelta(0)
_DELIMITER = "\t"
_LINE_TERMINATOR = "\n"


def format_offset(offset: datetime.timedelta) -> str:
    """Render a UTC offset as [-]H:MM:SS."""
    total_seconds = int(offset.total_seconds())
    sign = "-" if total_seconds < 0 else ""
    (minutes, seconds) = divmod(abs(total_seconds), 60)
    (hours, minutes) = divmod(minutes, 60)
    return f"{sign}{hours}:{minutes:02d}:{seconds:02d}"


def format_timestamp(instant: TransitionInstant) -> str:
    """Render the local time of a transition followed by the offset before it."""
    timestamp = instant.local_datetime.isoformat(timespec="seconds")
    if instant.old_utc_offset > _ZERO:
        timestamp += "+"
    return timestamp + format_offset(instant.old_utc_offset)


def _range_row(key: str, value: ValidityRange) -> tuple[str, ...] | None:
    """Return the row for a single range or None if it should be skipped."""
    valid_from, valid_until = value.valid_from, value.valid_until
    if valid_from is None and valid_until is not None:
        return (key, "", "", "", format_timestamp(valid_until))
    if valid_from is not None and valid_until is not None:
        if valid_from.local_datetime == valid_until.local_datetime:
            return None
        return (
            key,
            format_offset(valid_from.old_utc_offset),
            format_timestamp(valid_from),
            format_offset(valid_from.new_utc_offset),
            format_timestamp(valid_until),
        )
    if valid_from is not None:
        return (
            key,
            format_offset(valid_from.old_utc_offset),
            format_timestamp(valid_from),
            format_offset(valid_from.new_utc_offset),
            "",
        )
    raise RangeError(f"Both from and until of a range in zone {key} are None")


def iter_rows(
    zones: Mapping[str, Sequence[ValidityRange]] | None,
) -> Iterator[tuple[str, ...]]:
    """Yield the rows for the validity ranges of every zone."""
    if zones is None:
        raise ValueError("Zones to export cannot be None")
    for key, ranges in zones.items():
        for value in ranges:
            if (row := _range_row(key, value)) is not None:
                yield row


def write_ranges(
    output: TextIO,
    zones: Mapping[str, Sequence[YearTransitionPair]] | None,
    include_edges: bool = False,
) -> int:
    """Write the header and a row for each range of each zone.

    Returns the number of rows written, not counting the header.
    """
    if zones is None:
        raise ValueError("Zones to export cannot be None")
    writer = csv.writer(
        output, delimiter=_DELIMITER, lineterminator=_LINE_TERMINATOR
    )
    writer.writerow(HEADER)
    count = 0
    for row in iter_rows(to_ranges(zones, include_edges=include_edges)):
        writer.writerow(row)
        count += 1
    _LOGGER.debug("Wrote %d ranges for %d zones", count, len(zones))
    return count


def write_zone_list(output: TextIO, keys: Iterable[str]) -> int:
    """Write one zone identifier per line and return the number written."""
    count = 0
    for key in keys:
        output.write(key + _LINE_TERMINATOR)
        count += 1
    return count
