#!/usr/bin/env python3
"""
Review session tying period selection, reconciliation, the ledger and export.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Union

from .export import default_artifact_name, default_filename, export_report
from .ledger import Ledger
from .period import DateRange, PeriodSelector, PeriodState, current_week_state
from .reconcile import Analyser, LogReadFailure, reconcile

logger = logging.getLogger(__name__)


class ReviewSession:
    """
    Synchronous review of hours for one selected period.

    Every period change rebuilds the hours map and the ledger before
    returning. A failed rebuild leaves no ledger behind.

    Parameters
    ----------
    analyser : Analyser
        Source of per-project totals.
    catalogue : Callable[[], Sequence[str]]
        Returns the known top-level projects; read once per rebuild.
    log_source : Path
        Log source handed to the analyser.
    state : Optional[PeriodState], optional
        Initial period (default: the current ISO week).
    stop_at_first_error : bool, optional
        Ledger parsing policy, see ``Ledger``.
    """

    def __init__(
        self,
        analyser: Analyser,
        catalogue: Callable[[], Sequence[str]],
        log_source: Path,
        state: Optional[PeriodState] = None,
        stop_at_first_error: bool = False,
    ) -> None:
        self.analyser = analyser
        self.catalogue = catalogue
        self.log_source = Path(log_source)
        self.state = state or current_week_state()
        self.stop_at_first_error = stop_at_first_error
        self.hours: Optional[Dict[str, float]] = None
        self.ledger: Optional[Ledger] = None

    @property
    def selector(self) -> PeriodSelector:
        return self.state.selector

    @property
    def date_range(self) -> DateRange:
        return self.state.date_range

    def rebuild(self) -> Ledger:
        """
        Query the analyser for the current range and rebuild the ledger.

        Returns
        -------
        Ledger
            Fresh ledger for the period.

        Raises
        ------
        LogReadFailure
            If the analyser cannot read its log source.
        """
        self.hours = None
        self.ledger = None
        date_range = self.date_range
        logger.debug("Rebuilding review for %s -> %s", date_range.start, date_range.end)
        try:
            totals = self.analyser.process_period(
                self.log_source,
                date_range.start,
                date_range.end,
            )
        except OSError as exc:
            raise LogReadFailure(f"Cannot read {self.log_source}: {exc}") from exc
        hours = reconcile(totals, self.catalogue())
        self.ledger = Ledger.from_hours(hours, stop_at_first_error=self.stop_at_first_error)
        self.hours = hours
        return self.ledger

    def select_year(self, year: int) -> Ledger:
        self.state.select_year(year)
        return self.rebuild()

    def select_week(self, week: int) -> Ledger:
        self.state.select_week(week)
        return self.rebuild()

    def select_week_of(self, year: int, week: int) -> Ledger:
        self.state.select_week_of(year, week)
        return self.rebuild()

    def set_custom_range(
        self,
        start: Union[date, datetime],
        end: Union[date, datetime],
    ) -> Ledger:
        self.state.set_custom_range(start, end)
        return self.rebuild()

    def set_custom_start(self, start: Union[date, datetime]) -> Ledger:
        self.state.set_custom_start(start)
        return self.rebuild()

    def set_custom_end(self, end: Union[date, datetime]) -> Ledger:
        self.state.set_custom_end(end)
        return self.rebuild()

    def require_ledger(self) -> Ledger:
        if self.ledger is None:
            raise RuntimeError("No reviewed hours; rebuild the session first.")
        return self.ledger

    def edit_hours(self, project: str, text: str) -> Ledger:
        ledger = self.require_ledger()
        ledger.set_hours_text(project, text)
        return ledger

    def default_artifact_name(self) -> str:
        return default_artifact_name(self.selector)

    def default_filename(self) -> str:
        return default_filename(self.selector)

    def export(self, destination: Union[str, Path]) -> Path:
        return export_report(self.require_ledger(), destination)
