"""Configuration for building a transition table."""

from __future__ import annotations

import logging
import pathlib
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .tzif import timezoneinfo

__all__ = [
    "DEFAULT_ZONE_LIST",
    "TableConfig",
    "load_zone_keys",
]

_LOGGER = logging.getLogger(__name__)

DEFAULT_ZONE_LIST = pathlib.Path("TimezoneList.txt")

_COMMENT = "#"


class TableConfig(BaseModel):
    """Settings for a single run over a set of zones."""

    start_year: int = Field(ge=1, le=9998)
    """First year to find transitions in."""

    end_year: int = Field(ge=1, le=9998)
    """Last year to find transitions in, inclusive."""

    output_dir: pathlib.Path = pathlib.Path(".")
    """Directory the table files are written to."""

    zone_list: pathlib.Path = DEFAULT_ZONE_LIST
    """File with one zone identifier per line, every zone is used if missing."""

    include_edges: bool = False
    """Add open ended ranges before the first and after the last transition."""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_years(self) -> Self:
        """Verify the year range is not empty."""
        if self.start_year > self.end_year:
            raise ValueError(
                f"Start year {self.start_year} must be <= end year {self.end_year}"
            )
        return self


def load_zone_keys(path: pathlib.Path | None = None) -> list[str]:
    """Return the zone identifiers to build a table for.

    Reads one identifier per line from the file, skipping blank lines and
    comments. When the file does not exist every available zone is returned.
    """
    if path is not None and path.is_file():
        _LOGGER.info("Using timezones from the file %s", path)
        with path.open("r", encoding="utf-8") as zone_file:
            return [
                key
                for line in zone_file
                if (key := line.strip()) and not key.startswith(_COMMENT)
            ]
    _LOGGER.info("Zone list %s not found, using all available timezones", path)
    return timezoneinfo.available_keys()
