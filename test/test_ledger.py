"""
Tests for the editable hours ledger.
"""

from __future__ import annotations

import doctest
import math

import pytest

import tsreview.ledger as ledger_module
from tsreview.ledger import Ledger


@pytest.mark.unit
def test_initialize_formats_hours_with_two_decimals():
    """
    Ensure seeded entries carry two-decimal text and matching hours.

    Returns
    -------
    None
        This test asserts ledger initialization.
    """
    ledger = Ledger.from_hours({"Dev": 10.0, "Ops": 1.0 / 3})

    assert [entry.hours_text for entry in ledger.entries.values()] == ["10.00", "0.33"]
    assert ledger.entries["Ops"].hours == 0.33
    assert ledger.valid
    assert ledger.total_text == "10.33"


@pytest.mark.unit
def test_recompute_sets_total_and_percentages():
    ledger = Ledger.from_hours({"Dev": 10.0, "Meetings": 5.0})

    assert ledger.total == 15.0
    assert ledger.entries["Dev"].percent_text == "66.67%"
    assert ledger.entries["Meetings"].percent_text == "33.33%"


@pytest.mark.unit
def test_recompute_is_idempotent():
    """
    Ensure recomputing without edits changes nothing.

    Returns
    -------
    None
        This test asserts recompute idempotence.
    """
    ledger = Ledger.from_hours({"A": 1.25, "B": 2.5, "C": 0.0})
    first = (ledger.total, [entry.percent for entry in ledger.entries.values()])

    ledger.recompute()
    second = (ledger.total, [entry.percent for entry in ledger.entries.values()])

    assert first == second


@pytest.mark.parametrize(
    "hours",
    [
        {"A": 1.0, "B": 1.0, "C": 1.0},
        {"A": 7.13, "B": 0.01, "C": 12.5, "D": 3.33},
        {"Only": 42.0},
    ],
)
@pytest.mark.unit
def test_percentages_sum_to_one_hundred(hours):
    """
    Ensure displayed percentages add up to 100 within rounding slack.

    Parameters
    ----------
    hours : dict
        Seed hours per project.

    Returns
    -------
    None
        This test asserts the percentage sum invariant.
    """
    ledger = Ledger.from_hours(hours)
    shown = sum(float(ledger_module.format_fixed(entry.percent)) for entry in ledger.entries.values())

    assert math.isclose(shown, 100.0, abs_tol=0.01 * len(ledger))


@pytest.mark.unit
def test_unparsable_text_invalidates_ledger():
    """
    Ensure malformed hours switch the ledger to its error state.

    Returns
    -------
    None
        This test asserts the error transition.
    """
    ledger = Ledger.from_hours({"Dev": 10.0, "Ops": 5.0})

    ledger.set_hours_text("Dev", "abc")

    assert not ledger.valid
    assert ledger.total is None
    assert ledger.total_text == ledger_module.ERROR_MARKER
    assert ledger.error_projects == ["Dev"]
    assert all(entry.percent is None for entry in ledger.entries.values())
    assert ledger.entries["Ops"].percent_text == "N/A"


@pytest.mark.unit
def test_fixing_text_restores_valid_state():
    ledger = Ledger.from_hours({"Dev": 10.0, "Ops": 5.0})
    ledger.set_hours_text("Dev", "abc")

    ledger.set_hours_text("Dev", "5")

    assert ledger.valid
    assert ledger.total == 10.0
    assert ledger.error_projects == []
    assert ledger.entries["Dev"].percent == 50.0


@pytest.mark.unit
def test_default_policy_reparses_entries_after_a_failure():
    """
    Ensure entries after an invalid one still pick up their new text.

    Returns
    -------
    None
        This test asserts independent reparsing.
    """
    ledger = Ledger.from_hours({"A": 1.0, "B": 2.0, "C": 3.0})
    ledger.entries["C"].hours_text = "9"

    ledger.set_hours_text("A", "x")

    assert ledger.entries["C"].hours == 9.0
    assert ledger.error_projects == ["A"]


@pytest.mark.unit
def test_stop_at_first_error_keeps_stale_hours_after_failure():
    """
    Ensure the compatibility policy leaves later entries with stale hours.

    Returns
    -------
    None
        This test asserts the abort-on-first-failure behavior.
    """
    ledger = Ledger.from_hours({"A": 1.0, "B": 2.0, "C": 3.0}, stop_at_first_error=True)
    ledger.entries["C"].hours_text = "oops"
    ledger.entries["B"].hours_text = "7"

    ledger.set_hours_text("A", "x")

    assert not ledger.valid
    assert ledger.entries["B"].hours == 2.0
    assert ledger.entries["C"].hours == 3.0
    assert ledger.error_projects == ["A"]


@pytest.mark.unit
def test_zero_total_shows_percentages_as_error():
    ledger = Ledger.from_hours({"Dev": 0.0, "Ops": 0.0})

    assert ledger.valid
    assert ledger.total == 0.0
    assert ledger.total_text == "0.00"
    assert [entry.percent_text for entry in ledger.entries.values()] == ["ERROR", "ERROR"]


@pytest.mark.unit
def test_overflowing_hours_text_invalidates_ledger():
    ledger = Ledger.from_hours({"Dev": 1.0, "Ops": 1.0})

    ledger.set_hours_text("Dev", "1e400")

    assert not ledger.valid
    assert ledger.total is None
    assert ledger.error_projects == ["Dev"]


@pytest.mark.unit
def test_overflowing_total_shows_error_instead_of_percentages():
    """
    Ensure a sum past the float range is not turned into percentages.

    Returns
    -------
    None
        This test asserts the non-finite total display.
    """
    ledger = Ledger.from_hours({"Dev": 1.0, "Ops": 1.0})
    ledger.set_hours_text("Dev", "1e308")
    ledger.set_hours_text("Ops", "1e308")

    assert ledger.valid
    assert math.isinf(ledger.total)
    assert ledger.total_text == "ERROR"
    assert all(math.isnan(entry.percent) for entry in ledger.entries.values())
    assert [entry.percent_text for entry in ledger.entries.values()] == ["ERROR", "ERROR"]


@pytest.mark.unit
def test_set_hours_text_rejects_unknown_project():
    ledger = Ledger.from_hours({"Dev": 1.0})

    with pytest.raises(KeyError):
        ledger.set_hours_text("Nope", "1")


@pytest.mark.parametrize("text", ["", "  ", "abc", "1,5", "nan", "inf", "1_000", "0x10", "--1", "1e400", "-1e400"])
@pytest.mark.unit
def test_parse_hours_text_rejects_non_numbers(text):
    with pytest.raises(ValueError):
        ledger_module.parse_hours_text(text)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("3", 3.0),
        ("3.", 3.0),
        (".5", 0.5),
        ("-1.25", -1.25),
        ("+2.125", 2.125),
        ("1.5e2", 150.0),
        (" 4.00 ", 4.0),
    ],
)
@pytest.mark.unit
def test_parse_hours_text_accepts_real_numbers(text, expected):
    assert ledger_module.parse_hours_text(text) == expected


@pytest.mark.unit
def test_rows_report_display_values():
    ledger = Ledger.from_hours({"Dev": 3.0, "Ops": 1.0})
    ledger.set_hours_text("Ops", "one")

    assert list(ledger.rows()) == [
        ("Dev", "3.00", "N/A", False),
        ("Ops", "one", "N/A", True),
    ]


@pytest.mark.unit
def test_ledger_doctest_examples():
    results = doctest.testmod(ledger_module)
    assert results.failed == 0
