#!/usr/bin/env python3
"""
Reconcile analyser totals with the configured top-level projects.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Mapping, Protocol

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3_600_000


class LogReadFailure(RuntimeError):
    """
    Raised when the analyser cannot read or parse the log source.
    """


class Analyser(Protocol):
    """
    Log analyser turning a log source and a date range into totals.

    ``process_period`` blocks until the totals are available and returns
    milliseconds per top-level project, in the analyser's own order.
    It raises ``LogReadFailure`` when the log source is unreadable.
    """

    def process_period(
        self,
        log_source: Path,
        start: datetime,
        end: datetime,
    ) -> Mapping[str, int]:
        ...


def ms_to_hours(milliseconds: float) -> float:
    """
    Convert milliseconds to hours.

    Examples
    --------
    >>> ms_to_hours(5_400_000)
    1.5
    """
    return milliseconds / MS_PER_HOUR


def reconcile(
    analyser_totals: Mapping[str, int],
    known_projects: Iterable[str],
) -> Dict[str, float]:
    """
    Build the complete hours map for a review period.

    Analyser projects come first in reported order; known projects the
    analyser did not report are appended with zero hours.

    Parameters
    ----------
    analyser_totals : Mapping[str, int]
        Milliseconds per project reported by the analyser.
    known_projects : Iterable[str]
        Configured top-level projects, in display order.

    Returns
    -------
    Dict[str, float]
        Hours per project, in insertion order.

    Examples
    --------
    >>> reconcile({"Alpha": 3_600_000}, ["Alpha", "Beta"])
    {'Alpha': 1.0, 'Beta': 0.0}
    >>> reconcile({"Gamma": 1_800_000}, ["Alpha"])
    {'Gamma': 0.5, 'Alpha': 0.0}
    """
    hours: Dict[str, float] = {}
    for project, milliseconds in analyser_totals.items():
        hours[project] = ms_to_hours(milliseconds)
    reported = len(hours)
    for project in known_projects:
        if project not in hours:
            hours[project] = 0.0
    logger.debug(
        "Reconciled %d reported and %d zero-filled projects",
        reported,
        len(hours) - reported,
    )
    return hours
