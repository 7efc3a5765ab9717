"""Test fixtures."""

import pathlib

import pytest

ZONE_LIST = """\
# Zones used to exercise every category
Europe/Amsterdam
Australia/Sydney

Asia/Tokyo
UTC
Nowhere/Zone
"""


@pytest.fixture(name="zone_list")
def mock_zone_list(tmp_path: pathlib.Path) -> pathlib.Path:
    """Fixture that writes a zone list file and returns its path."""
    path = tmp_path / "TimezoneList.txt"
    path.write_text(ZONE_LIST, encoding="utf-8")
    return path
