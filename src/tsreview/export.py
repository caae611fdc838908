#!/usr/bin/env python3
"""
Export reviewed hours as a fractional timesheet report.
"""

from __future__ import annotations

import logging
import math
import os
from pathlib import Path
from typing import List, Union

from .ledger import Ledger, format_fixed
from .period import CustomRange, DateRange, DerivedWeek, PeriodSelector, format_display_date

logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "timesheet-"
REPORT_SUFFIX = ".txt"
FIELD_SEPARATOR = ","
LINE_TERMINATOR = "\r\n"


class ExportPrecondition(ValueError):
    """
    Raised when the ledger cannot be exported as-is.
    """


class DestinationWriteFailure(OSError):
    """
    Raised when the report file cannot be created or written.
    """


def _compact_date(value) -> str:
    return format_display_date(value).replace("/", "")


def default_artifact_name(selector: Union[PeriodSelector, DateRange]) -> str:
    """
    Return the default report name for a period.

    Parameters
    ----------
    selector : DerivedWeek | CustomRange | DateRange
        Selected period; anything not derived from a week is named by its dates.

    Returns
    -------
    str
        Artifact name without a file extension.

    Examples
    --------
    >>> default_artifact_name(DerivedWeek(2024, 3))
    'timesheet-2024wk03'
    >>> from datetime import datetime
    >>> default_artifact_name(CustomRange(datetime(2024, 1, 1), datetime(2024, 1, 8)))
    'timesheet-01012024-01082024'
    """
    if isinstance(selector, DerivedWeek):
        return ARTIFACT_PREFIX + selector.week_id
    date_range = selector.date_range if isinstance(selector, CustomRange) else selector
    return (
        f"{ARTIFACT_PREFIX}{_compact_date(date_range.start)}"
        f"-{_compact_date(date_range.end)}"
    )


def default_filename(selector: Union[PeriodSelector, DateRange]) -> str:
    """
    Return the default report file name proposed to the save prompt.

    Examples
    --------
    >>> default_filename(DerivedWeek(2024, 3))
    'timesheet-2024wk03.txt'
    """
    return default_artifact_name(selector) + REPORT_SUFFIX


def format_report(ledger: Ledger) -> str:
    """
    Render the report text for a valid ledger.

    Each project gets one ``<project>,<fraction>`` line terminated by
    CRLF. Project names are not escaped.

    Raises
    ------
    ExportPrecondition
        If the ledger is invalid or its total is zero or not finite.
    """
    if not ledger.valid:
        raise ExportPrecondition(
            "Cannot export while hours are invalid: " + ", ".join(ledger.error_projects)
        )
    total = ledger.total
    if not total:
        raise ExportPrecondition("Cannot export a report with zero total hours.")
    if not math.isfinite(total):
        raise ExportPrecondition("Cannot export a report with a non-finite total.")
    lines: List[str] = []
    for project, entry in ledger.entries.items():
        if FIELD_SEPARATOR in project:
            logger.warning(
                "Project name %r contains %r; report line is ambiguous",
                project,
                FIELD_SEPARATOR,
            )
        fraction = entry.hours / total
        lines.append(f"{project}{FIELD_SEPARATOR}{format_fixed(fraction)}{LINE_TERMINATOR}")
    return "".join(lines)


def export_report(ledger: Ledger, destination: Union[str, Path]) -> Path:
    """
    Write the fractional report for a ledger.

    The text goes to a sibling temporary file first and replaces the
    destination only once fully written. Parent directories are not
    created.

    Parameters
    ----------
    ledger : Ledger
        Reviewed hours.
    destination : str | Path
        Report file path.

    Returns
    -------
    Path
        Path written.

    Raises
    ------
    ExportPrecondition
        If the ledger is invalid or its total is zero or not finite.
    DestinationWriteFailure
        If the report cannot be written.
    """
    text = format_report(ledger)
    path = Path(destination)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(tmp_path, path)
    except OSError as exc:
        try:
            tmp_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as cleanup_exc:
            logger.warning("Could not remove %s: %s", tmp_path, cleanup_exc)
        raise DestinationWriteFailure(f"Cannot write report to {path}: {exc}") from exc
    logger.info("Exported %d projects to %s", len(ledger), path)
    return path
