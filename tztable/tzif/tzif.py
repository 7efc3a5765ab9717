"""Library for reading TZif files.

The tzdata package and the system zoneinfo directory store timezones as TZif
files (see rfc8536). A TZif file has a v1 header and data block with 32-bit
transition times, and for version 2 and later a second header and data block
with 64-bit transition times followed by a footer holding a POSIX TZ string
for the transitions after the last one in the data block.

Only what is needed to compute offset transitions is kept: transition times,
the local time type of each transition and the footer rule. Leap second
records and the standard/wall and UT/local indicators are skipped.
"""

import enum
import io
import logging
import struct
from collections import namedtuple
from dataclasses import dataclass

from .model import TimezoneInfo, Transition
from .tz_rule import parse_tz_rule

_LOGGER = logging.getLogger(__name__)

# Records specifying the local time type:
#  - utoff (4 bytes): Number of seconds to add to UTC to determine local time
#  - dst (1 byte): Indicates the time is DST (1) or standard (0)
#  - idx (1 byte): Offset index into the time zone designation octets (0-charcnt-1)
_LOCAL_TIME_TYPE_STRUCT_FORMAT = ">l?B"
_LOCAL_TIME_RECORD_SIZE = 6
_LEAP_CORRECTION_SIZE = 4

_LocalTimeType = namedtuple("_LocalTimeType", ["utoff", "dst", "idx"])


class _TZifVersion(enum.Enum):
    """Defines information related to _TZifVersions."""

    V1 = (b"\x00", 4, "l")  # 32-bit in v1
    V2 = (b"2", 8, "q")  # 64-bit in v2+
    V3 = (b"3", 8, "q")

    def __init__(self, version: bytes, time_size: int, time_format: str):
        self.version = version
        self.time_size = time_size
        self.time_format = time_format


@dataclass
class _Header:
    """TZif _Header information."""

    SIZE = 44  # Total size of the header to read
    STRUCT_FORMAT = "".join(
        [
            ">",  # Use standard size of packed value bytes
            "4s",  # magic (4 bytes)
            "c",  # version (1 byte)
            "15x",  # unused
            "6l",  # isutccnt, isstdcnt, leapcnt, timecnt, typecnt, charcnt
        ]
    )
    MAGIC = b"TZif"

    version: bytes
    isutccnt: int
    isstdcnt: int
    leapcnt: int
    timecnt: int
    typecnt: int
    charcnt: int

    @classmethod
    def from_bytes(cls, header_bytes: bytes) -> "_Header":
        """Parse and validate the header bytes."""
        if len(header_bytes) != _Header.SIZE:
            raise ValueError("zoneinfo file header was truncated")
        (magic, version, *counts) = struct.unpack(_Header.STRUCT_FORMAT, header_bytes)
        if magic != _Header.MAGIC:
            raise ValueError("zoneinfo file did not contain magic header")
        header = _Header(version, *counts)
        if header.isutccnt not in (0, header.typecnt):
            raise ValueError(
                f"UTC/local indicators in datablock mismatched ({header.isutccnt}, {header.typecnt})"
            )
        if header.isstdcnt not in (0, header.typecnt):
            raise ValueError(
                f"standard/wall indicators in datablock mismatched ({header.isstdcnt}, {header.typecnt})"
            )
        return header

    def check_counts(self) -> None:
        """Verify the data block has local time records and designations."""
        if self.typecnt == 0:
            raise ValueError("Local time records in block is zero")
        if self.charcnt == 0:
            raise ValueError("Total number of octets is zero")


def _read_datablock(
    header: _Header, version: _TZifVersion, buf: io.BytesIO
) -> tuple[list[Transition], list[_LocalTimeType]]:
    """Read transitions and local time types from the buffer."""
    transition_times = struct.unpack(
        f">{header.timecnt}{version.time_format}",
        buf.read(header.timecnt * version.time_size),
    )
    # Zero-based indices into the array of local time type records
    transition_types = struct.unpack(f">{header.timecnt}B", buf.read(header.timecnt))
    local_time_types = [
        _LocalTimeType._make(
            struct.unpack(
                _LOCAL_TIME_TYPE_STRUCT_FORMAT, buf.read(_LOCAL_TIME_RECORD_SIZE)
            )
        )
        for _ in range(header.typecnt)
    ]

    # Designations, leap seconds, standard/wall and UT/local indicators
    buf.seek(
        header.charcnt
        + header.leapcnt * (version.time_size + _LEAP_CORRECTION_SIZE)
        + header.isstdcnt
        + header.isutccnt,
        io.SEEK_CUR,
    )

    transitions: list[Transition] = []
    for transition_time, time_type in zip(transition_times, transition_types):
        if time_type >= len(local_time_types):
            raise ValueError(
                f"transition_type out of bounds {time_type} >= {len(local_time_types)}"
            )
        local_time_type = local_time_types[time_type]
        transitions.append(
            Transition(transition_time, local_time_type.utoff, local_time_type.dst)
        )
    return (transitions, local_time_types)


def read_tzif(content: bytes) -> TimezoneInfo:
    """Read the TZif file and parse and return the timezone records."""
    try:
        return _read_tzif(io.BytesIO(content))
    except struct.error as err:
        raise ValueError(f"Unable to unpack TZif file: {err}") from err


def _read_tzif(buf: io.BytesIO) -> TimezoneInfo:
    # V1 header and block
    header = _Header.from_bytes(buf.read(_Header.SIZE))
    if header.version == _TZifVersion.V1.version:
        header.check_counts()
    (transitions, local_time_types) = _read_datablock(header, _TZifVersion.V1, buf)
    if header.version != _TZifVersion.V1.version:
        # V2+ header and block
        header = _Header.from_bytes(buf.read(_Header.SIZE))
        header.check_counts()
        (transitions, local_time_types) = _read_datablock(
            header, _TZifVersion.V2, buf
        )

    rule = None
    if header.version != _TZifVersion.V1.version:
        # V2+ footer
        parts = buf.read().decode("UTF-8").split("\n")
        if len(parts) != 3:
            raise ValueError("Failed to read TZ footer")
        if parts[1]:
            rule = parse_tz_rule(parts[1])

    _LOGGER.debug(
        "Read %d transitions (version %s, rule %s)",
        len(transitions),
        header.version,
        rule,
    )
    return TimezoneInfo(
        transitions=transitions,
        initial_utoff=local_time_types[0].utoff,
        dst_types=any(local_time_type.dst for local_time_type in local_time_types),
        rule=rule,
    )
