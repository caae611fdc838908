#!/usr/bin/env python3
"""
Review and export hours spent on top-level projects for a week or date range.
"""

import logging
import sys
from typing import List, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def configure_logging(verbose: bool = False) -> None:
    """
    Send library log records to stderr.

    Parameters
    ----------
    verbose : bool, optional
        Include debug records (default: warnings and above).
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )


def build_app():
    """
    Build the Typer app lazily to keep fast-path imports light.

    Returns
    -------
    typer.Typer
        Configured Typer application for the tsreview CLI.
    """
    import typer

    app = typer.Typer(help="Review and export hours per top-level project")

    @app.callback()
    def main_callback(
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Log debug details to stderr.",
        ),
    ):
        configure_logging(verbose)

    @app.command("review")
    def review_cmd(
        year: Optional[int] = typer.Option(
            None,
            "--year",
            help="ISO week-numbering year (defaults to the current one).",
        ),
        week: Optional[int] = typer.Option(
            None,
            "--week",
            min=1,
            max=53,
            help="ISO week number (defaults to the current one).",
        ),
        start: Optional[str] = typer.Option(
            None,
            "--from",
            help="Custom range start, inclusive (YYYY-MM-DD).",
        ),
        end: Optional[str] = typer.Option(
            None,
            "--to",
            help="Custom range end, exclusive (YYYY-MM-DD).",
        ),
        config: Optional[str] = typer.Option(
            None,
            "--config",
            help="Config file (default: ~/.config/tsreview/config.toml).",
        ),
        log_file: Optional[str] = typer.Option(
            None,
            "--log-file",
            help="Time log database to analyse.",
        ),
        project: Optional[List[str]] = typer.Option(
            None,
            "--project",
            help="Extra top-level project to list (repeatable).",
        ),
        overrides: Optional[List[str]] = typer.Option(
            None,
            "--set",
            help="Override hours as PROJECT=HOURS (repeatable).",
        ),
        interactive: bool = typer.Option(
            False,
            "--interactive",
            "-i",
            help="Prompt for hour edits before saving.",
        ),
        output: Optional[str] = typer.Option(
            None,
            "--output",
            "-o",
            help="Save the report to this path.",
        ),
        save: bool = typer.Option(
            False,
            "--save",
            help="Save the report under its default name in the report directory.",
        ),
        stop_at_first_error: bool = typer.Option(
            False,
            "--stop-at-first-error",
            help="Stop reparsing hours at the first invalid entry.",
        ),
    ):
        """
        Review hours for a week or custom range and optionally save them.
        """
        from . import review as review_module

        try:
            exit_code = review_module.run_review(
                year=year,
                week=week,
                range_start=start,
                range_end=end,
                config_path=config,
                log_file=log_file,
                projects=project,
                overrides=overrides,
                interactive=interactive,
                output=output,
                save=save,
                stop_at_first_error=stop_at_first_error,
            )
        except ValueError as exc:
            print(f"tsreview: review failed: {exc}", file=sys.stderr)
            raise typer.Exit(code=1)
        raise typer.Exit(code=exit_code)

    @app.command("name")
    def name_cmd(
        year: Optional[int] = typer.Option(
            None,
            "--year",
            help="ISO week-numbering year (defaults to the current one).",
        ),
        week: Optional[int] = typer.Option(
            None,
            "--week",
            min=1,
            max=53,
            help="ISO week number (defaults to the current one).",
        ),
        start: Optional[str] = typer.Option(
            None,
            "--from",
            help="Custom range start, inclusive (YYYY-MM-DD).",
        ),
        end: Optional[str] = typer.Option(
            None,
            "--to",
            help="Custom range end, exclusive (YYYY-MM-DD).",
        ),
    ):
        """
        Print the default report file name for a period.
        """
        from . import review as review_module

        try:
            exit_code = review_module.run_name(
                year=year,
                week=week,
                range_start=start,
                range_end=end,
            )
        except ValueError as exc:
            print(f"tsreview: name failed: {exc}", file=sys.stderr)
            raise typer.Exit(code=1)
        raise typer.Exit(code=exit_code)

    return app


def main():
    """
    Entry point for the tsreview command.
    """
    app = build_app()
    app()


if __name__ == "__main__":
    main()
