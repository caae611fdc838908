#!/usr/bin/env python3
"""
Load review settings: the time log location and the top-level projects.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomllib

CONFIG_ENV_VAR = "TSREVIEW_CONFIG_PATH"


@dataclass(frozen=True)
class ReviewConfig:
    """
    Review settings.

    Attributes
    ----------
    log_file : Path
        Time log handed to the analyser.
    projects : List[str]
        Known top-level projects, in display order.
    report_dir : Path
        Directory for reports saved under their default name.
    """

    log_file: Path
    projects: List[str] = field(default_factory=list)
    report_dir: Path = field(default_factory=Path)


def _expand(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))


def get_config_path() -> Path:
    """
    Return the configuration file path.

    Examples
    --------
    >>> isinstance(get_config_path(), Path)
    True
    """
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if override:
        return _expand(override)
    return Path.home() / ".config" / "tsreview" / "config.toml"


def get_default_log_path() -> Path:
    return Path.home() / ".local" / "share" / "tsreview" / "time.db"


def _dedupe_projects(values: List[Any]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if not isinstance(value, str):
            raise ValueError(f"Project names must be strings, got {value!r}.")
        name = value.strip()
        if not name or name in seen:
            continue
        ordered.append(name)
        seen.add(name)
    return ordered


def parse_config(parsed: Dict[str, Any]) -> ReviewConfig:
    """
    Build settings from parsed TOML data.

    Raises
    ------
    ValueError
        If a value has the wrong type.

    Examples
    --------
    >>> parse_config({"projects": ["Dev", "Dev", "Ops"], "log_file": "/tmp/t.db"}).projects
    ['Dev', 'Ops']
    """
    log_file = parsed.get("log_file")
    if log_file is not None and not isinstance(log_file, str):
        raise ValueError("log_file must be a string path.")
    report_dir = parsed.get("report_dir")
    if report_dir is not None and not isinstance(report_dir, str):
        raise ValueError("report_dir must be a string path.")
    projects = parsed.get("projects", [])
    if not isinstance(projects, list):
        raise ValueError("projects must be a list of names.")
    return ReviewConfig(
        log_file=_expand(log_file) if log_file else get_default_log_path(),
        projects=_dedupe_projects(projects),
        report_dir=_expand(report_dir) if report_dir else Path.cwd(),
    )


def load_config(path: Optional[Path] = None) -> ReviewConfig:
    """
    Load review settings from disk.

    Parameters
    ----------
    path : Optional[Path], optional
        Configuration file (defaults to the standard path).

    Returns
    -------
    ReviewConfig
        Parsed settings, or defaults when the file is missing.

    Raises
    ------
    ValueError
        If the file cannot be read or is not valid TOML.
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        return parse_config({})
    try:
        parsed = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ValueError(f"Cannot load config {config_path}: {exc}") from exc
    return parse_config(parsed)
