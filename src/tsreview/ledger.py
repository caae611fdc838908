#!/usr/bin/env python3
"""
Editable ledger of hours per project with derived total and percentages.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

ERROR_MARKER = "ERROR"
NOT_AVAILABLE = "N/A"

_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def format_fixed(value: float) -> str:
    """
    Format a number with exactly two decimals.

    Python's ``.2f`` rounds the exact binary value half-to-even.

    Examples
    --------
    >>> format_fixed(10 / 15)
    '0.67'
    >>> format_fixed(0.125)
    '0.12'
    >>> format_fixed(3)
    '3.00'
    """
    return f"{value:.2f}"


def parse_hours_text(text: str) -> float:
    """
    Parse user-entered hours with a dot decimal separator.

    Parameters
    ----------
    text : str
        Raw hours text.

    Returns
    -------
    float
        Parsed hours.

    Raises
    ------
    ValueError
        If the text is not a plain real number.

    Examples
    --------
    >>> parse_hours_text(" 7.5 ")
    7.5
    >>> parse_hours_text("1e1")
    10.0
    >>> parse_hours_text("7,5")
    Traceback (most recent call last):
    ...
    ValueError: Invalid hours value: '7,5'
    >>> parse_hours_text("1e400")
    Traceback (most recent call last):
    ...
    ValueError: Invalid hours value: '1e400'
    """
    raw = (text or "").strip()
    if not _NUMBER_PATTERN.match(raw):
        raise ValueError(f"Invalid hours value: {text!r}")
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"Invalid hours value: {text!r}")
    return value


@dataclass
class LedgerEntry:
    """
    Editable hours for one project.

    Attributes
    ----------
    project : str
        Top-level project name.
    hours_text : str
        Hours as last entered by the user; may be malformed.
    hours : float
        Last successfully parsed hours value.
    percent : Optional[float]
        Share of the total; None while the ledger is invalid, NaN when the
        total is zero or not finite (shown as ERROR).
    error : bool
        True when ``hours_text`` failed to parse on the last recompute.
    """

    project: str
    hours_text: str
    hours: float
    percent: Optional[float] = None
    error: bool = False

    @property
    def percent_text(self) -> str:
        if self.percent is None:
            return NOT_AVAILABLE
        if not math.isfinite(self.percent):
            return ERROR_MARKER
        return f"{format_fixed(self.percent)}%"


class Ledger:
    """
    Hours ledger that revalidates everything on each edit.

    Parameters
    ----------
    stop_at_first_error : bool, optional
        Stop reparsing at the first malformed entry, leaving later
        entries with their previous hours (default: False, every entry
        is reparsed).
    """

    def __init__(self, stop_at_first_error: bool = False) -> None:
        self.stop_at_first_error = stop_at_first_error
        self.entries: Dict[str, LedgerEntry] = {}
        self.valid = True
        self._total: Optional[float] = 0.0

    @classmethod
    def from_hours(
        cls,
        hours: Mapping[str, float],
        stop_at_first_error: bool = False,
    ) -> "Ledger":
        ledger = cls(stop_at_first_error=stop_at_first_error)
        ledger.initialize(hours)
        return ledger

    def initialize(self, hours: Mapping[str, float]) -> None:
        """
        Replace all entries with freshly formatted hours, then recompute.

        Parameters
        ----------
        hours : Mapping[str, float]
            Hours per project, in display order.
        """
        self.entries = {}
        for project, value in hours.items():
            text = format_fixed(value)
            self.entries[project] = LedgerEntry(
                project=project,
                hours_text=text,
                hours=float(text),
            )
        self.recompute()

    def set_hours_text(self, project: str, text: str) -> None:
        """
        Overwrite one entry's text and recompute the ledger.

        Raises
        ------
        KeyError
            If the project has no entry.
        """
        if project not in self.entries:
            raise KeyError(project)
        self.entries[project].hours_text = text
        self.recompute()

    def recompute(self) -> bool:
        """
        Reparse all entries and refresh the total and percentages.

        Returns
        -------
        bool
            True when every entry parsed.
        """
        failed: List[str] = []
        for entry in self.entries.values():
            try:
                entry.hours = parse_hours_text(entry.hours_text)
            except ValueError:
                entry.error = True
                failed.append(entry.project)
                if self.stop_at_first_error:
                    break
            else:
                entry.error = False
        if failed:
            self.valid = False
            self._total = None
            for entry in self.entries.values():
                entry.percent = None
            logger.debug("Ledger invalid; unparsable hours for %s", ", ".join(failed))
            return False
        total = sum(entry.hours for entry in self.entries.values())
        self.valid = True
        self._total = total
        for entry in self.entries.values():
            entry.percent = (
                100 * entry.hours / total if total != 0 and math.isfinite(total) else math.nan
            )
        logger.debug("Ledger total %s over %d projects", format_fixed(total), len(self.entries))
        return True

    @property
    def total(self) -> Optional[float]:
        return self._total if self.valid else None

    @property
    def total_text(self) -> str:
        if not self.valid or self._total is None or not math.isfinite(self._total):
            return ERROR_MARKER
        return format_fixed(self._total)

    @property
    def error_projects(self) -> List[str]:
        return [entry.project for entry in self.entries.values() if entry.error]

    def rows(self) -> Iterator[Tuple[str, str, str, bool]]:
        """
        Yield ``(project, hours_text, percent_text, error)`` display rows.
        """
        for entry in self.entries.values():
            yield entry.project, entry.hours_text, entry.percent_text, entry.error

    def __len__(self) -> int:
        return len(self.entries)
