"""Tests for the command line tool."""

import pathlib

import pytest

from tztable.__main__ import main
from tztable.table import (
    DST_WITHOUT_TRANSITIONS_LIST,
    MIXED_DST_TABLE,
    NOT_FOUND_LIST,
    SINGLE_DST_TABLE,
    TIMEZONE_TABLE,
    WITHOUT_DST_LIST,
)

HEADER = "timezone\tcurrent_offset\tvalid_from\tnew_offset\tvalid_until"


def test_main(
    zone_list: pathlib.Path,
    tmp_path: pathlib.Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test creating the table files for a list of zones."""
    output_dir = tmp_path / "output"
    assert (
        main(
            [
                "2022",
                "2023",
                "--zone-list",
                str(zone_list),
                "--output-dir",
                str(output_dir),
            ]
        )
        == 0
    )

    captured = capsys.readouterr()
    lines = captured.out.splitlines()
    assert lines[0] == "Timezone DST transition table generator"
    assert (
        "Creating timezone transition table from 2022 to 2023 for 5 timezones...Done"
        in lines
    )
    assert lines[-2:] == ["", "5 zones processed."]
    assert f"1 timezones with start and end transition written to file {TIMEZONE_TABLE}" in lines

    assert (output_dir / TIMEZONE_TABLE).read_text(encoding="ascii").splitlines() == [
        HEADER,
        "Europe/Amsterdam\t1:00:00\t2022-03-27T02:00:00+1:00:00\t2:00:00\t2022-10-30T03:00:00+2:00:00",
        "Europe/Amsterdam\t2:00:00\t2022-10-30T03:00:00+2:00:00\t1:00:00\t2023-03-26T02:00:00+1:00:00",
        "Europe/Amsterdam\t1:00:00\t2023-03-26T02:00:00+1:00:00\t2:00:00\t2023-10-29T03:00:00+2:00:00",
    ]
    assert (output_dir / SINGLE_DST_TABLE).read_text(
        encoding="ascii"
    ).splitlines() == [
        HEADER,
        "Australia/Sydney\t10:00:00\t2022-10-02T02:00:00+10:00:00\t11:00:00\t2023-10-01T02:00:00+10:00:00",
    ]
    assert (output_dir / MIXED_DST_TABLE).read_text(encoding="ascii") == (
        f"{HEADER}\n"
    )
    assert (output_dir / DST_WITHOUT_TRANSITIONS_LIST).read_text(
        encoding="ascii"
    ) == "Asia/Tokyo\n"
    assert (output_dir / WITHOUT_DST_LIST).read_text(encoding="ascii") == "UTC\n"
    assert (output_dir / NOT_FOUND_LIST).read_text(encoding="ascii") == (
        "Nowhere/Zone\n"
    )


def test_main_with_edges(zone_list: pathlib.Path, tmp_path: pathlib.Path) -> None:
    """Test the open ended ranges are written when requested."""
    zone_list.write_text("Europe/Amsterdam\n", encoding="utf-8")
    assert (
        main(
            [
                "2022",
                "2022",
                "--zone-list",
                str(zone_list),
                "--output-dir",
                str(tmp_path),
                "--edges",
            ]
        )
        == 0
    )
    assert (tmp_path / TIMEZONE_TABLE).read_text(encoding="ascii").splitlines() == [
        HEADER,
        "Europe/Amsterdam\t\t\t\t2022-03-27T02:00:00+1:00:00",
        "Europe/Amsterdam\t1:00:00\t2022-03-27T02:00:00+1:00:00\t2:00:00\t2022-10-30T03:00:00+2:00:00",
        "Europe/Amsterdam\t2:00:00\t2022-10-30T03:00:00+2:00:00\t1:00:00\t",
    ]


@pytest.mark.parametrize(
    "argv",
    [
        ["2023", "2022"],
        ["0", "2022"],
        ["2022", "10000"],
        ["2022"],
        ["twenty", "2022"],
    ],
)
def test_invalid_arguments(argv: list[str], tmp_path: pathlib.Path) -> None:
    """Test invalid arguments exit with a usage error."""
    with pytest.raises(SystemExit) as exc_info:
        main([*argv, "--output-dir", str(tmp_path)])
    assert exc_info.value.code == 2
    assert not (tmp_path / TIMEZONE_TABLE).exists()
