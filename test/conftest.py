"""
Shared pytest fixtures for tsreview tests.
"""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def isolate_config(tmp_path, monkeypatch) -> None:
    """
    Ensure tests never read the real review configuration.

    Parameters
    ----------
    tmp_path : pathlib.Path
        Temporary path provided by pytest.
    monkeypatch : pytest.MonkeyPatch
        Monkeypatch fixture for environment updates.
    """
    monkeypatch.setenv("TSREVIEW_CONFIG_PATH", str(tmp_path / "missing-config.toml"))
