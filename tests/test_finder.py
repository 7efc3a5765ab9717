"""Tests for finding the transitions of a zone."""

import datetime

import pytest

from tztable.exceptions import TransitionError
from tztable.finder import find_transitions, next_transition, pair_by_year
from tztable.model import TransitionInstant, YearTransitionPair
from tztable.ranges import zone_ranges
from tztable.rules import AdjustmentRule, FixedDateRule, FloatingDateRule

WINTER = datetime.timedelta(hours=2)
SUMMER = datetime.timedelta(hours=3)

# Summer time starts 2022-03-25T02:00 (4th Friday) and ends 2022-10-14T03:00
# (2nd Friday), then starts 2023-03-27T02:00 (4th Monday) and ends
# 2023-10-19T03:00 (3rd Thursday).
RULES = [
    AdjustmentRule(
        start_year=2022,
        end_year=2022,
        daylight_start=FloatingDateRule(
            month=3, week_of_month=4, day_of_week=5, time=datetime.timedelta(hours=2)
        ),
        daylight_end=FloatingDateRule(
            month=10, week_of_month=2, day_of_week=5, time=datetime.timedelta(hours=3)
        ),
    ),
    AdjustmentRule(
        start_year=2023,
        end_year=2023,
        daylight_start=FloatingDateRule(
            month=3, week_of_month=4, day_of_week=1, time=datetime.timedelta(hours=2)
        ),
        daylight_end=FloatingDateRule(
            month=10, week_of_month=3, day_of_week=4, time=datetime.timedelta(hours=3)
        ),
    ),
]

SUMMER_2022 = datetime.datetime(2022, 3, 25, 2, 0, 0)
WINTER_2022 = datetime.datetime(2022, 10, 14, 3, 0, 0)
SUMMER_2023 = datetime.datetime(2023, 3, 27, 2, 0, 0)
WINTER_2023 = datetime.datetime(2023, 10, 19, 3, 0, 0)


def summer_time_offset(local: datetime.datetime) -> datetime.timedelta:
    """Offset resolver for the test zone."""
    for start, end in ((SUMMER_2022, WINTER_2022), (SUMMER_2023, WINTER_2023)):
        if start <= local < end:
            return SUMMER
    return WINTER


def test_no_rules() -> None:
    """Test a zone without adjustment rules has no transitions."""
    assert find_transitions(2022, 2023, [], summer_time_offset) == []


def test_no_rule_for_start_year() -> None:
    """Test no transitions are found when the first year is not covered."""
    assert find_transitions(2020, 2023, RULES, summer_time_offset) == []


def test_invalid_years() -> None:
    """Test the start year must not be after the end year."""
    with pytest.raises(ValueError, match="is after end year"):
        find_transitions(2023, 2022, RULES, summer_time_offset)


def test_two_years() -> None:
    """Test finding a start and end transition in each year."""
    result = find_transitions(2022, 2023, RULES, summer_time_offset)
    assert result == [
        YearTransitionPair(
            start=TransitionInstant(SUMMER_2022, WINTER, SUMMER),
            end=TransitionInstant(WINTER_2022, SUMMER, WINTER),
        ),
        YearTransitionPair(
            start=TransitionInstant(SUMMER_2023, WINTER, SUMMER),
            end=TransitionInstant(WINTER_2023, SUMMER, WINTER),
        ),
    ]


def test_two_years_to_ranges() -> None:
    """Test the transitions of two years bridge into three ranges."""
    ranges = zone_ranges(find_transitions(2022, 2023, RULES, summer_time_offset))
    assert len(ranges) == 3
    assert [
        (value.valid_from.local_datetime, value.valid_until.local_datetime)
        for value in ranges
        if value.valid_from and value.valid_until
    ] == [
        (SUMMER_2022, WINTER_2022),
        (WINTER_2022, SUMMER_2023),
        (SUMMER_2023, WINTER_2023),
    ]


def test_end_year_limits_result() -> None:
    """Test transitions after the end year are not returned."""
    result = find_transitions(2022, 2022, RULES, summer_time_offset)
    assert len(result) == 1
    assert result[0].start.local_datetime == SUMMER_2022
    assert result[0].end
    assert result[0].end.local_datetime == WINTER_2022


def test_stops_when_rules_run_out() -> None:
    """Test the search ends when no rule covers the next year."""
    result = find_transitions(2022, 2030, RULES, summer_time_offset)
    assert len(result) == 2


def test_fixed_rules_at_midnight() -> None:
    """Test fixed date rules produce transitions at midnight."""
    rules = [
        AdjustmentRule(
            start_year=2000,
            end_year=2100,
            daylight_start=FixedDateRule(
                month=3, day=21, time=datetime.timedelta(hours=2)
            ),
            daylight_end=FixedDateRule(
                month=9, day=21, time=datetime.timedelta(hours=3)
            ),
        )
    ]
    result = find_transitions(2022, 2024, rules, lambda local: WINTER)
    assert [
        (pair.start.local_datetime, pair.end.local_datetime)
        for pair in result
        if pair.end
    ] == [
        (datetime.datetime(2022, 3, 21), datetime.datetime(2022, 9, 21)),
        (datetime.datetime(2023, 3, 21), datetime.datetime(2023, 9, 21)),
        (datetime.datetime(2024, 3, 21), datetime.datetime(2024, 9, 21)),
    ]


def test_offsets_resolved_six_hours_around_transition() -> None:
    """Test the old and new offsets are resolved away from the transition."""
    probes: list[datetime.datetime] = []

    def resolver(local: datetime.datetime) -> datetime.timedelta:
        probes.append(local)
        return WINTER

    find_transitions(2022, 2022, RULES[:1], resolver)
    assert probes == [
        datetime.datetime(2022, 3, 24, 20, 0, 0),
        datetime.datetime(2022, 3, 25, 8, 0, 0),
        datetime.datetime(2022, 10, 13, 21, 0, 0),
        datetime.datetime(2022, 10, 14, 9, 0, 0),
    ]


def test_start_after_end_in_year() -> None:
    """Test rules where DST starts late in the year and ends early in the year.

    Starting from January 1st the start of DST later in the year is found
    first, so the earlier end of DST is never reached and every year has a
    single transition.
    """
    rules = [
        AdjustmentRule(
            start_year=2000,
            end_year=2100,
            daylight_start=FloatingDateRule(
                month=10, week_of_month=1, day_of_week=0, time=datetime.timedelta(hours=2)
            ),
            daylight_end=FloatingDateRule(
                month=4, week_of_month=1, day_of_week=0, time=datetime.timedelta(hours=3)
            ),
        )
    ]
    result = find_transitions(2022, 2023, rules, lambda local: WINTER)
    assert [pair.start.local_datetime for pair in result] == [
        datetime.datetime(2022, 10, 2, 2),
        datetime.datetime(2023, 10, 1, 2),
    ]
    assert all(pair.is_degenerate for pair in result)


def test_zero_width_window() -> None:
    """Test a rule whose start and end are the same instant is still emitted."""
    same_day = FixedDateRule(month=6, day=1)
    rules = [
        AdjustmentRule(
            start_year=2022, end_year=2022, daylight_start=same_day, daylight_end=same_day
        )
    ]
    result = find_transitions(2022, 2022, rules, lambda local: WINTER)
    assert len(result) == 1
    assert result[0].start.local_datetime == datetime.datetime(2022, 6, 1)
    assert result[0].is_degenerate


def test_next_transition() -> None:
    """Test the next transition relative to a point in time."""
    assert next_transition(datetime.datetime(2022, 1, 1), RULES) == SUMMER_2022
    assert next_transition(SUMMER_2022, RULES) == SUMMER_2022
    assert next_transition(
        SUMMER_2022 + datetime.timedelta(seconds=1), RULES
    ) == WINTER_2022
    assert next_transition(
        WINTER_2022 + datetime.timedelta(days=1), RULES
    ) == SUMMER_2023
    assert next_transition(WINTER_2023 + datetime.timedelta(days=1), RULES) is None
    assert next_transition(datetime.datetime(2021, 6, 1), RULES) is None
    assert next_transition(datetime.datetime(2022, 1, 1), []) is None


def test_next_year_rule_boundary() -> None:
    """Test the next year's rule is used once both transitions have passed."""
    rules = [
        AdjustmentRule(
            start_year=2021,
            end_year=2021,
            daylight_start=FixedDateRule(month=3, day=1),
            daylight_end=FixedDateRule(month=12, day=30),
        ),
        AdjustmentRule(
            start_year=2022,
            end_year=2022,
            daylight_start=FloatingDateRule(month=1, week_of_month=1, day_of_week=6),
            daylight_end=FixedDateRule(month=6, day=1),
        ),
    ]
    # January 1st 2022 is a Saturday
    assert next_transition(datetime.datetime(2021, 12, 31), rules) == (
        datetime.datetime(2022, 1, 1)
    )


def test_next_year_start_before_cursor() -> None:
    """Test a next year start that resolves into the past is an error."""
    rules = [
        AdjustmentRule(
            start_year=2021,
            end_year=2021,
            daylight_start=FixedDateRule(month=3, day=1),
            daylight_end=FixedDateRule(month=12, day=30),
        ),
        AdjustmentRule(
            start_year=2022,
            end_year=2022,
            # First Saturday of January 2022 (the 1st), two days before midnight
            daylight_start=FloatingDateRule(
                month=1,
                week_of_month=1,
                day_of_week=6,
                time=datetime.timedelta(days=-2),
            ),
            daylight_end=FixedDateRule(month=6, day=1),
        ),
    ]
    with pytest.raises(TransitionError, match="is before"):
        next_transition(datetime.datetime(2021, 12, 31), rules)
    with pytest.raises(TransitionError):
        find_transitions(2021, 2022, rules, lambda local: WINTER)


def test_pair_by_year() -> None:
    """Test grouping transitions into the first and last of each year."""
    first = TransitionInstant(datetime.datetime(2022, 3, 1), WINTER, SUMMER)
    middle = TransitionInstant(datetime.datetime(2022, 6, 1), SUMMER, WINTER)
    last = TransitionInstant(datetime.datetime(2022, 9, 1), WINTER, SUMMER)
    single = TransitionInstant(datetime.datetime(2023, 3, 1), SUMMER, WINTER)
    assert pair_by_year([first, middle, last, single]) == [
        YearTransitionPair(first, last),
        YearTransitionPair(single, single),
    ]
    assert pair_by_year([]) == []
