#!/usr/bin/env python3
"""
Command-line review of hours per top-level project.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .config import ReviewConfig, load_config
from .export import DestinationWriteFailure, ExportPrecondition, default_filename
from .ledger import Ledger
from .period import (
    PeriodState,
    current_week_state,
    format_display_date,
    parse_user_date,
)
from .reconcile import LogReadFailure
from .session import ReviewSession
from .timelog import TimeLogAnalyser

EDIT_PROMPT = "Project to edit (blank to finish): "


def parse_hours_override(value: str) -> Tuple[str, str]:
    """
    Split a ``PROJECT=HOURS`` override.

    Raises
    ------
    ValueError
        If the value has no project name or no ``=``.

    Examples
    --------
    >>> parse_hours_override("Dev=10.5")
    ('Dev', '10.5')
    >>> parse_hours_override("R&D, misc = 2")
    ('R&D, misc', '2')
    """
    project, sep, hours = value.rpartition("=")
    project = project.strip()
    if not sep or not project:
        raise ValueError(f"Expected PROJECT=HOURS, got '{value}'.")
    return project, hours.strip()


def build_period_state(
    *,
    year: Optional[int] = None,
    week: Optional[int] = None,
    range_start: Optional[str] = None,
    range_end: Optional[str] = None,
) -> PeriodState:
    """
    Build the period selection from command-line options.

    A custom range needs both dates; a missing year or week keeps the
    current week's value.

    Raises
    ------
    ValueError
        If options conflict or a date is malformed.
    """
    state = current_week_state()
    if range_start or range_end:
        if year is not None or week is not None:
            raise ValueError("Use either --year/--week or --from/--to, not both.")
        if not (range_start and range_end):
            raise ValueError("A custom range needs both --from and --to.")
        state.set_custom_range(parse_user_date(range_start), parse_user_date(range_end))
        return state
    if year is not None or week is not None:
        state.select_week_of(
            year if year is not None else state.year,
            week if week is not None else state.week,
        )
    return state


def describe_period(session: ReviewSession) -> List[str]:
    date_range = session.date_range
    lines = []
    if session.state.is_custom:
        lines.append("Year: Custom  Week: Custom")
    else:
        lines.append(f"Year: {session.state.year}  Week: {session.state.week}")
    lines.append(f"From (inclusive): {format_display_date(date_range.start)}")
    lines.append(f"To (exclusive): {format_display_date(date_range.end)}")
    return lines


def format_ledger_lines(ledger: Ledger) -> List[str]:
    """
    Render ledger rows and the total for display.
    """
    width = max([len(project) for project in ledger.entries] + [len("TOTAL")])
    lines = []
    for project, hours_text, percent_text, error in ledger.rows():
        marker = "  <- invalid" if error else ""
        lines.append(f"{project + ':':<{width + 1}} {hours_text:>8} h ({percent_text}){marker}")
    lines.append(f"{'TOTAL:':<{width + 1}} {ledger.total_text:>8} h")
    return lines


def print_review(session: ReviewSession, ledger: Ledger) -> None:
    for line in describe_period(session):
        print(line)
    print()
    for line in format_ledger_lines(ledger):
        print(line)


def prompt_edits(
    session: ReviewSession,
    input_func: Callable[[str], str] = input,
) -> None:
    """
    Prompt for hour edits until a blank project name is entered.
    """
    ledger = session.require_ledger()
    while True:
        try:
            project = input_func(EDIT_PROMPT).strip()
        except EOFError:
            return
        if not project:
            return
        if project not in ledger.entries:
            print(f"tsreview: unknown project '{project}'.", file=sys.stderr)
            continue
        current = ledger.entries[project].hours_text
        try:
            text = input_func(f"Hours for {project} [{current}]: ")
        except EOFError:
            return
        if not text.strip():
            continue
        session.edit_hours(project, text)
        for line in format_ledger_lines(ledger):
            print(line)


def open_session(
    config: ReviewConfig,
    state: PeriodState,
    *,
    stop_at_first_error: bool = False,
) -> ReviewSession:
    return ReviewSession(
        TimeLogAnalyser(),
        lambda: list(config.projects),
        config.log_file,
        state=state,
        stop_at_first_error=stop_at_first_error,
    )


def resolve_config(
    config_path: Optional[str],
    log_file: Optional[str],
    projects: Optional[Sequence[str]],
) -> ReviewConfig:
    config = load_config(Path(config_path) if config_path else None)
    if log_file or projects:
        config = ReviewConfig(
            log_file=Path(log_file) if log_file else config.log_file,
            projects=list(config.projects) + [
                name for name in (projects or []) if name not in config.projects
            ],
            report_dir=config.report_dir,
        )
    return config


def run_review(
    *,
    year: Optional[int] = None,
    week: Optional[int] = None,
    range_start: Optional[str] = None,
    range_end: Optional[str] = None,
    config_path: Optional[str] = None,
    log_file: Optional[str] = None,
    projects: Optional[Sequence[str]] = None,
    overrides: Optional[Sequence[str]] = None,
    interactive: bool = False,
    output: Optional[str] = None,
    save: bool = False,
    stop_at_first_error: bool = False,
    input_func: Callable[[str], str] = input,
) -> int:
    """
    Review hours for a period and optionally save the report.

    Returns
    -------
    int
        Exit code.

    Raises
    ------
    ValueError
        If options, configuration, or overrides are invalid.
    """
    config = resolve_config(config_path, log_file, projects)
    state = build_period_state(
        year=year,
        week=week,
        range_start=range_start,
        range_end=range_end,
    )
    session = open_session(config, state, stop_at_first_error=stop_at_first_error)
    try:
        ledger = session.rebuild()
    except LogReadFailure as exc:
        print(f"tsreview: review failed: {exc}", file=sys.stderr)
        return 1
    for override in overrides or []:
        project, text = parse_hours_override(override)
        if project not in ledger.entries:
            raise ValueError(f"Unknown project '{project}'.")
        session.edit_hours(project, text)
    print_review(session, ledger)
    if interactive:
        prompt_edits(session, input_func=input_func)
    if not (output or save):
        return 0
    destination = Path(output) if output else config.report_dir / session.default_filename()
    try:
        written = session.export(destination)
    except (ExportPrecondition, DestinationWriteFailure) as exc:
        print(f"tsreview: save failed: {exc}", file=sys.stderr)
        return 1
    print(f"Saved report: {written}")
    return 0


def run_name(
    *,
    year: Optional[int] = None,
    week: Optional[int] = None,
    range_start: Optional[str] = None,
    range_end: Optional[str] = None,
) -> int:
    """
    Print the default report file name for a period.
    """
    state = build_period_state(
        year=year,
        week=week,
        range_start=range_start,
        range_end=range_end,
    )
    print(default_filename(state.selector))
    return 0
