"""
Tests for ISO week resolution and period selection.
"""

from __future__ import annotations

import doctest
import logging
from datetime import date, datetime, timedelta

import pytest

import tsreview.period as period


@pytest.mark.parametrize("year", [2015, 2019, 2020, 2021, 2024, 2025, 2026])
@pytest.mark.unit
def test_resolve_from_week_yields_monday_and_seven_days(year):
    """
    Ensure every ISO week of a year starts on Monday and spans seven days.

    Parameters
    ----------
    year : int
        Year to walk through.

    Returns
    -------
    None
        This test asserts week range shape.
    """
    weeks = date(year, 12, 28).isocalendar()[1]
    for week in range(1, weeks + 1):
        date_range = period.resolve_from_week(year, week)
        assert date_range.start.weekday() == 0
        assert date_range.start.time() == datetime.min.time()
        assert date_range.end - date_range.start == timedelta(days=7)
        assert date_range.start.isocalendar()[:2] == (year, week)


@pytest.mark.parametrize(
    ("year", "week", "expected_start"),
    [
        (2020, 1, datetime(2019, 12, 30)),
        (2021, 1, datetime(2021, 1, 4)),
        (2020, 53, datetime(2020, 12, 28)),
        (2024, 3, datetime(2024, 1, 15)),
        (2026, 1, datetime(2025, 12, 29)),
    ],
)
@pytest.mark.unit
def test_resolve_from_week_year_boundaries(year, week, expected_start):
    """
    Ensure ISO week numbering edge effects around new year are reproduced.

    Returns
    -------
    None
        This test asserts boundary week starts.
    """
    date_range = period.resolve_from_week(year, week)

    assert date_range.start == expected_start
    assert date_range.end == expected_start + timedelta(days=7)


@pytest.mark.unit
def test_week_53_rolls_into_next_year():
    """
    Ensure week 53 of a 52-week year selects week 1 of the next year.

    Returns
    -------
    None
        This test asserts week rollover.
    """
    assert period.resolve_from_week(2021, 53).start == datetime(2022, 1, 3)
    assert period.normalize_week(2021, 53) == period.DerivedWeek(2022, 1)


@pytest.mark.parametrize("week", [0, 54, -1])
@pytest.mark.unit
def test_resolve_from_week_rejects_out_of_range(week):
    with pytest.raises(ValueError):
        period.resolve_from_week(2024, week)


@pytest.mark.parametrize(("year", "week"), [(9999, 52), (10000, 1), (0, 1)])
@pytest.mark.unit
def test_resolve_from_week_rejects_weeks_outside_calendar(year, week):
    with pytest.raises(ValueError):
        period.resolve_from_week(year, week)


@pytest.mark.unit
def test_custom_range_is_not_validated(caplog):
    """
    Ensure inverted custom ranges are kept and only logged.

    Returns
    -------
    None
        This test asserts the inverted range passes through.
    """
    with caplog.at_level(logging.WARNING, logger="tsreview.period"):
        selector = period.set_custom_range(date(2024, 1, 8), date(2024, 1, 1))

    assert selector.date_range.start == datetime(2024, 1, 8)
    assert selector.date_range.is_inverted
    assert "starts on or after its end" in caplog.text


@pytest.mark.unit
def test_custom_range_truncates_to_midnight():
    selector = period.set_custom_range(
        datetime(2024, 1, 1, 13, 45),
        datetime(2024, 1, 8, 9, 0),
    )

    assert selector.start == datetime(2024, 1, 1)
    assert selector.end == datetime(2024, 1, 8)


@pytest.mark.unit
def test_selecting_year_after_custom_rederives_both_fields():
    """
    Ensure picking a concrete year clears custom mode and reuses the held week.

    Returns
    -------
    None
        This test asserts the combined selector recovery.
    """
    state = period.PeriodState(2024, 10)
    state.set_custom_range(date(2024, 2, 1), date(2024, 2, 15))
    assert state.is_custom

    derived = state.select_year(2023)

    assert not state.is_custom
    assert derived == period.DerivedWeek(2023, 10)
    assert state.date_range == period.resolve_from_week(2023, 10)


@pytest.mark.unit
def test_selecting_week_after_custom_keeps_last_year():
    state = period.PeriodState(2022, 5)
    state.set_custom_start(date(2022, 1, 20))
    state.select_week(7)

    assert state.selector == period.DerivedWeek(2022, 7)


@pytest.mark.unit
def test_selection_normalizes_to_iso_week_actually_shown():
    """
    Ensure both fields move together when a selection rolls over.

    Returns
    -------
    None
        This test asserts normalization of the held pair.
    """
    state = period.PeriodState(2021, 1)
    state.select_week(53)

    assert (state.year, state.week) == (2022, 1)
    assert state.date_range.start == datetime(2022, 1, 3)


@pytest.mark.unit
def test_custom_single_bounds_keep_the_other_bound():
    state = period.PeriodState(2024, 1)
    shown = state.date_range

    state.set_custom_end(date(2024, 1, 20))
    assert state.date_range.start == shown.start
    assert state.date_range.end == datetime(2024, 1, 20)

    state.set_custom_start(date(2024, 1, 10))
    assert state.date_range == period.DateRange(datetime(2024, 1, 10), datetime(2024, 1, 20))


@pytest.mark.unit
def test_current_week_state_uses_iso_week_of_today():
    state = period.current_week_state(date(2021, 1, 2))

    assert state.selector == period.DerivedWeek(2020, 53)


@pytest.mark.parametrize("value", ["", "2024/01/08", "2024-13-01", "tomorrow"])
@pytest.mark.unit
def test_parse_user_date_rejects_malformed(value):
    with pytest.raises(ValueError):
        period.parse_user_date(value)


@pytest.mark.unit
def test_period_doctest_examples():
    """
    Run doctest examples embedded in period helpers.

    Returns
    -------
    None
        This test asserts doctest coverage for period helpers.
    """
    results = doctest.testmod(period)
    assert results.failed == 0
