# tests/conftest.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List

import pytest

from versedb.config import AggregatorConfig
from versedb.files.appender import AppendStatus, FileAppender, ResilientAppender
from versedb.logger import BasicLogger


@pytest.fixture
def tmp_project_root(tmp_path: Path) -> Path:
    """Directory tree the tests populate with fake Verse projects."""
    root = tmp_path / "projects"
    root.mkdir()
    return root


@pytest.fixture
def test_logger() -> logging.Logger:
    """
    Basic logger for tests – uses the same BasicLogger,
    without the JSON log file.
    """
    return BasicLogger("test-logger", log_to_file=False).get_logger()


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., AggregatorConfig]:
    def _make(**overrides) -> AggregatorConfig:
        values = dict(
            output_path=tmp_path / "out" / "verse_code_database.md",
            pattern="*.verse",
            well_known_paths=(),
            retry_attempts=3,
            retry_delay=0.0,
            log_to_file=False,
        )
        values.update(overrides)
        return AggregatorConfig(**values)

    return _make


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class ScriptedAppender:
    """
    Stand-in for FileAppender: returns queued statuses first, then delegates
    to a real FileAppender. `lock_when` forces LOCKED for matching text.
    """

    def __init__(self, logger, statuses: List[AppendStatus] = None, lock_when: Callable[[str], bool] = None):
        self.real = FileAppender(logger=logger)
        self.statuses = list(statuses or [])
        self.lock_when = lock_when
        self.calls: List[str] = []
        self.truncated_to: List[int] = []

    def _next(self, text: str):
        self.calls.append(text)
        if self.statuses:
            return self.statuses.pop(0)
        if self.lock_when is not None and self.lock_when(text):
            return AppendStatus.LOCKED
        return None

    def append(self, path, text):
        status = self._next(text)
        return status if status is not None else self.real.append(path, text)

    def reset(self, path, text):
        status = self._next(text)
        return status if status is not None else self.real.reset(path, text)

    def truncate(self, path, size):
        self.truncated_to.append(size)
        return self.real.truncate(path, size)


def make_resilient(appender, logger, attempts: int = 3, sleeps: List[float] = None) -> ResilientAppender:
    record = sleeps if sleeps is not None else []
    return ResilientAppender(
        appender=appender,
        max_attempts=attempts,
        delay=0.5,
        sleep=record.append,
        logger=logger,
    )
