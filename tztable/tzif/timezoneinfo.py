"""Library for loading the TZif data of a timezone.

This package follows the same approach as zoneinfo for loading timezone
data, except that the tzdata python package is preferred over the system
TZPATH so that results don't depend on the host.
"""

from __future__ import annotations

import logging
import os
import zoneinfo
from functools import cache
from importlib import resources

from ..exceptions import TimezoneInfoError
from .model import TimezoneInfo
from .tzif import read_tzif

__all__ = [
    "TimezoneInfoError",
    "available_keys",
    "read",
    "read_bytes",
]

_LOGGER = logging.getLogger(__name__)


@cache
def _read_system_timezones() -> frozenset[str]:
    """Read and cache the set of system and tzdata timezones."""
    return frozenset(zoneinfo.available_timezones())


@cache
def _read_tzdata_timezones() -> frozenset[str]:
    """Returns the set of valid timezones from tzdata only."""
    try:
        with resources.files("tzdata").joinpath("zones").open(
            "r", encoding="utf-8"
        ) as zones_file:
            return frozenset(line.strip() for line in zones_file if line.strip())
    except ModuleNotFoundError:
        return frozenset()


def available_keys() -> list[str]:
    """Return the sorted list of every timezone that can be read."""
    return sorted(_read_system_timezones() | _read_tzdata_timezones())


def _find_tzfile(key: str) -> str | None:
    """Retrieve the path to a TZif file from a key."""
    for search_path in zoneinfo.TZPATH:
        filepath = os.path.join(search_path, key)
        if os.path.isfile(filepath):
            return filepath
    return None


def _iana_key_to_resource(key: str) -> tuple[str, str]:
    """Returns the package and resource file for the specified timezone."""
    if "/" not in key:
        return "tzdata.zoneinfo", key
    package_loc, resource = key.rsplit("/", 1)
    package = "tzdata.zoneinfo." + package_loc.replace("/", ".")
    return package, resource


@cache
def read_bytes(key: str) -> bytes:
    """Return the raw TZif content for the timezone."""
    if key not in _read_system_timezones() and key not in _read_tzdata_timezones():
        raise TimezoneInfoError(f"Unable to find timezone in system timezones: {key}")

    # Prefer tzdata package
    (package, resource) = _iana_key_to_resource(key)
    try:
        with resources.files(package).joinpath(resource).open("rb") as tzdata_file:
            return tzdata_file.read()
    except (ModuleNotFoundError, FileNotFoundError):
        _LOGGER.debug("Timezone %s not in tzdata package, checking TZPATH", key)

    # Fallback to zoneinfo file on local disk
    if (tzfile := _find_tzfile(key)) is not None:
        with open(tzfile, "rb") as tzfile_file:
            return tzfile_file.read()

    raise TimezoneInfoError(f"Unable to find timezone data for {key}")


@cache
def read(key: str) -> TimezoneInfo:
    """Read the TZif file for the timezone and return timezone records."""
    _LOGGER.debug("Reading timezone: %s", key)
    try:
        return read_tzif(read_bytes(key))
    except ValueError as err:
        raise TimezoneInfoError(f"Unable to load tzdata for {key}: {err}") from err
