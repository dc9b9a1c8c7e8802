from __future__ import annotations

import logging
from collections import deque
from typing import Iterable

import pytest

from flakeid.config import get_settings
from flakeid.generator import reset_generators


class ScriptedClock:
    """Returns queued readings in order, then repeats the last one."""

    def __init__(self, readings: Iterable[int]) -> None:
        self.readings = deque(readings)
        self.current = self.readings[0]
        self.reads = 0

    def push(self, *readings: int) -> None:
        self.readings.extend(readings)

    def __call__(self) -> int:
        self.reads += 1
        if self.readings:
            self.current = self.readings.popleft()
        return self.current


@pytest.fixture
def scripted_clock():
    return ScriptedClock


@pytest.fixture(autouse=True)
def _isolated_idgen_state(monkeypatch):
    for name in ("IDGEN_DATACENTER_ID", "IDGEN_MACHINE_ID", "IDGEN_LOG_LEVEL", "IDGEN_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    reset_generators()
    yield
    get_settings.cache_clear()
    reset_generators()
    # configure_logging() detaches the package logger from root; undo it for caplog
    package_logger = logging.getLogger("flakeid")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
