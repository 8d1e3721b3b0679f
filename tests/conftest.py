"""Shared fixtures: headless matplotlib, recording collaborators, small boards."""

from __future__ import annotations

import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from config import RunConfig
from helpers import RecordingNotifier, RecordingRenderer
from scheduler import ManualScheduler


@pytest.fixture
def small_config() -> RunConfig:
    """10 x 8 cells."""
    return RunConfig(grid_unit=20, canvas_width=200, canvas_height=160)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def frame_sink() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()
