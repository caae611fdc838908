#!/usr/bin/env python3
"""
Period selection for timesheet reviews: ISO weeks and custom date ranges.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Union

logger = logging.getLogger(__name__)

DISPLAY_DATE_FORMAT = "%m/%d/%Y"
MIN_WEEK = 1
MAX_WEEK = 53


@dataclass(frozen=True)
class DateRange:
    """
    Concrete review period.

    Attributes
    ----------
    start : datetime
        Inclusive start, local wall time.
    end : datetime
        Exclusive end, local wall time.
    """

    start: datetime
    end: datetime

    @property
    def is_inverted(self) -> bool:
        return self.start >= self.end


@dataclass(frozen=True)
class DerivedWeek:
    """
    Period derived from an ISO-8601 year/week pair.
    """

    year: int
    week: int

    @property
    def date_range(self) -> DateRange:
        return resolve_from_week(self.year, self.week)

    @property
    def week_id(self) -> str:
        """
        Return the compact year/week identifier.

        Examples
        --------
        >>> DerivedWeek(2024, 3).week_id
        '2024wk03'
        """
        return f"{self.year}wk{self.week:02d}"


@dataclass(frozen=True)
class CustomRange:
    """
    Period chosen directly as a pair of dates.
    """

    start: datetime
    end: datetime

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start, self.end)


PeriodSelector = Union[DerivedWeek, CustomRange]


def _midnight(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime(value.year, value.month, value.day)


def week_monday(year: int, week: int) -> date:
    """
    Return the Monday starting an ISO-8601 week.

    Week 53 of a year with only 52 ISO weeks rolls into week 1 of the
    following year.

    Parameters
    ----------
    year : int
        ISO week-numbering year.
    week : int
        ISO week number (1-53).

    Returns
    -------
    date
        Monday of the selected week.

    Raises
    ------
    ValueError
        If the week number is out of range or the week lies outside the
        supported calendar.

    Examples
    --------
    >>> week_monday(2020, 1)
    datetime.date(2019, 12, 30)
    >>> week_monday(2021, 53)
    datetime.date(2022, 1, 3)
    """
    if not MIN_WEEK <= week <= MAX_WEEK:
        raise ValueError(f"Week number {week} is out of range ({MIN_WEEK}-{MAX_WEEK}).")
    try:
        first_monday = date.fromisocalendar(year, 1, 1)
        return first_monday + timedelta(weeks=week - 1)
    except OverflowError as exc:
        raise ValueError(f"Week {year}-W{week:02d} is outside the supported calendar.") from exc


def normalize_week(year: int, week: int) -> DerivedWeek:
    """
    Return the ISO year/week pair actually covered by a selection.

    Examples
    --------
    >>> normalize_week(2021, 53)
    DerivedWeek(year=2022, week=1)
    >>> normalize_week(2020, 53)
    DerivedWeek(year=2020, week=53)
    """
    iso = week_monday(year, week).isocalendar()
    return DerivedWeek(iso[0], iso[1])


def resolve_from_week(year: int, week: int) -> DateRange:
    """
    Resolve a 7-day range from an ISO-8601 year/week pair.

    Parameters
    ----------
    year : int
        ISO week-numbering year.
    week : int
        ISO week number.

    Returns
    -------
    DateRange
        Monday 00:00 (inclusive) to the following Monday 00:00 (exclusive).

    Raises
    ------
    ValueError
        If the week is out of range or its end falls past year 9999.

    Examples
    --------
    >>> resolve_from_week(2020, 1).start
    datetime.datetime(2019, 12, 30, 0, 0)
    >>> resolve_from_week(2020, 1).end
    datetime.datetime(2020, 1, 6, 0, 0)
    """
    start = _midnight(week_monday(year, week))
    try:
        end = start + timedelta(days=7)
    except OverflowError as exc:
        raise ValueError(f"Week {year}-W{week:02d} ends past the supported calendar.") from exc
    return DateRange(start, end)


def set_custom_range(
    start: Union[date, datetime],
    end: Union[date, datetime],
) -> CustomRange:
    """
    Build a custom period from two dates.

    The bounds are not validated; an inverted range is logged and kept.

    Parameters
    ----------
    start : date | datetime
        Inclusive start date.
    end : date | datetime
        Exclusive end date.

    Returns
    -------
    CustomRange
        Custom selector for the two dates at midnight.
    """
    selector = CustomRange(_midnight(start), _midnight(end))
    if selector.date_range.is_inverted:
        logger.warning(
            "Custom range starts on or after its end: %s -> %s",
            format_display_date(selector.start),
            format_display_date(selector.end),
        )
    return selector


def format_display_date(value: Union[date, datetime]) -> str:
    """
    Format a date the way review screens and file names show it.

    Examples
    --------
    >>> format_display_date(date(2024, 1, 8))
    '01/08/2024'
    """
    return value.strftime(DISPLAY_DATE_FORMAT)


def parse_user_date(value: str) -> date:
    """
    Parse a ``YYYY-MM-DD`` date entered by the user.

    Raises
    ------
    ValueError
        If the value is empty or not a calendar date.

    Examples
    --------
    >>> parse_user_date(" 2024-01-08 ")
    datetime.date(2024, 1, 8)
    """
    text = (value or "").strip()
    if not text:
        raise ValueError("Date value is required.")
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValueError(f"Invalid date '{text}'. Expected YYYY-MM-DD.") from exc


class PeriodState:
    """
    Year/week selection with a custom-range escape hatch.

    The last concrete year and week are kept while a custom range is
    active, so picking either one again re-derives the range from the
    pair currently held.
    """

    def __init__(self, year: int, week: int) -> None:
        derived = normalize_week(year, week)
        self.year = derived.year
        self.week = derived.week
        self.selector: PeriodSelector = derived

    @property
    def is_custom(self) -> bool:
        return isinstance(self.selector, CustomRange)

    @property
    def date_range(self) -> DateRange:
        return self.selector.date_range

    def _derive(self) -> DerivedWeek:
        derived = normalize_week(self.year, self.week)
        self.year = derived.year
        self.week = derived.week
        self.selector = derived
        return derived

    def select_year(self, year: int) -> DerivedWeek:
        self.year = year
        return self._derive()

    def select_week(self, week: int) -> DerivedWeek:
        self.week = week
        return self._derive()

    def select_week_of(self, year: int, week: int) -> DerivedWeek:
        self.year = year
        self.week = week
        return self._derive()

    def set_custom_range(
        self,
        start: Union[date, datetime],
        end: Union[date, datetime],
    ) -> CustomRange:
        selector = set_custom_range(start, end)
        self.selector = selector
        return selector

    def set_custom_start(self, start: Union[date, datetime]) -> CustomRange:
        return self.set_custom_range(start, self.date_range.end)

    def set_custom_end(self, end: Union[date, datetime]) -> CustomRange:
        return self.set_custom_range(self.date_range.start, end)


def current_week_state(today: Optional[date] = None) -> PeriodState:
    """
    Return a period state set to the ISO week containing ``today``.

    Examples
    --------
    >>> current_week_state(date(2024, 12, 30)).selector
    DerivedWeek(year=2025, week=1)
    """
    today = today or date.today()
    iso = today.isocalendar()
    return PeriodState(iso[0], iso[1])
