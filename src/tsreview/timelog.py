#!/usr/bin/env python3
"""
Analyser backed by a SQLite time log.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from .reconcile import LogReadFailure

logger = logging.getLogger(__name__)

NO_PROJECT = "-"

TIME_ENTRIES_SCHEMA = """
CREATE TABLE IF NOT EXISTS time_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    description TEXT NOT NULL,
    project TEXT,
    start_ts TEXT NOT NULL,
    end_ts TEXT
)
"""


@dataclass(frozen=True)
class LoggedInterval:
    """
    One logged interval read from the time log.

    Attributes
    ----------
    project : Optional[str]
        Dotted project name, if any.
    start : datetime
        Start timestamp (UTC).
    end : Optional[datetime]
        End timestamp (UTC), or None while still running.
    """

    project: Optional[str]
    start: datetime
    end: Optional[datetime]


def top_level_project(project: Optional[str]) -> str:
    """
    Return the top-level bucket for a dotted project name.

    Examples
    --------
    >>> top_level_project("work.alpha.beta")
    'work'
    >>> top_level_project(None)
    '-'
    >>> top_level_project(".")
    '-'
    """
    if not project:
        return NO_PROJECT
    parts = [part for part in project.split(".") if part.strip()]
    return parts[0].strip() if parts else NO_PROJECT


def normalize_to_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to UTC; naive values are local wall time.
    """
    return value.astimezone(timezone.utc)


def format_storage_timestamp(value: datetime) -> str:
    """
    Format timestamps the way the time log stores them.

    Examples
    --------
    >>> format_storage_timestamp(datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc))
    '2024-01-01T09:30:00Z'
    """
    return normalize_to_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_storage_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a stored timestamp.

    Raises
    ------
    ValueError
        If the text is not an ISO timestamp.

    Examples
    --------
    >>> parse_storage_timestamp("2024-01-01T09:30:00Z")
    datetime.datetime(2024, 1, 1, 9, 30, tzinfo=datetime.timezone.utc)
    >>> parse_storage_timestamp(None) is None
    True
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class TimeLogAnalyser:
    """
    Sum logged time per top-level project from a SQLite time log.
    """

    def __init__(self, now: Optional[datetime] = None) -> None:
        self.now = now

    def _connect(self, log_source: Path) -> sqlite3.Connection:
        path = Path(log_source)
        if not path.is_file():
            raise LogReadFailure(f"Time log not found: {path}")
        return sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)

    def load_intervals(
        self,
        log_source: Path,
        start: datetime,
        end: datetime,
    ) -> List[LoggedInterval]:
        """
        Load intervals overlapping a range, ordered by start time.

        Parameters
        ----------
        log_source : Path
            SQLite database path.
        start : datetime
            Range start (inclusive).
        end : datetime
            Range end (exclusive).

        Returns
        -------
        List[LoggedInterval]
            Overlapping intervals.

        Raises
        ------
        LogReadFailure
            If the database cannot be read or holds malformed timestamps.
        """
        query = (
            "SELECT project, start_ts, end_ts FROM time_entries"
            " WHERE (end_ts IS NULL OR end_ts > ?) AND start_ts < ?"
            " ORDER BY start_ts, id"
        )
        params = (format_storage_timestamp(start), format_storage_timestamp(end))
        intervals: List[LoggedInterval] = []
        try:
            conn = self._connect(log_source)
            try:
                rows = conn.execute(query, params).fetchall()
            finally:
                conn.close()
            for project, start_ts, end_ts in rows:
                interval_start = parse_storage_timestamp(start_ts)
                if interval_start is None:
                    raise ValueError("Time entry is missing its start timestamp.")
                intervals.append(
                    LoggedInterval(
                        project=project,
                        start=interval_start,
                        end=parse_storage_timestamp(end_ts),
                    )
                )
        except (sqlite3.Error, ValueError) as exc:
            raise LogReadFailure(f"Cannot read time log {log_source}: {exc}") from exc
        return intervals

    def process_period(
        self,
        log_source: Path,
        start: datetime,
        end: datetime,
    ) -> Dict[str, int]:
        """
        Return milliseconds per top-level project within ``[start, end)``.

        Projects appear in order of their first interval.
        """
        range_start = normalize_to_utc(start)
        range_end = normalize_to_utc(end)
        now = normalize_to_utc(self.now or datetime.now(timezone.utc))
        totals: Dict[str, int] = {}
        for interval in self.load_intervals(log_source, start, end):
            clipped_start = max(interval.start, range_start)
            clipped_end = min(interval.end or now, range_end)
            if clipped_end <= clipped_start:
                continue
            milliseconds = int(round((clipped_end - clipped_start).total_seconds() * 1000))
            bucket = top_level_project(interval.project)
            totals[bucket] = totals.get(bucket, 0) + milliseconds
        logger.debug("Analysed %s: %d projects with logged time", log_source, len(totals))
        return totals
