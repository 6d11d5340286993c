"""Shared pytest fixtures for chartlang tests."""

from pathlib import Path

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def charts_dir(fixtures_dir: Path) -> Path:
    """Return path to chart fixtures directory."""
    return fixtures_dir / "charts"


@pytest.fixture
def fetch_source(charts_dir: Path) -> str:
    """Return the fetch statechart source."""
    return (charts_dir / "fetch.chart").read_text(encoding="utf-8")


@pytest.fixture
def media_source(charts_dir: Path) -> str:
    """Return the media player statechart source (parallel + transient)."""
    return (charts_dir / "media.chart").read_text(encoding="utf-8")
