# tests/test_config.py
from __future__ import annotations

from pathlib import Path

import pytest

from versedb.config import DEFAULT_PATTERN, AggregatorConfig


def test_defaults():
    config = AggregatorConfig()

    assert config.pattern == DEFAULT_PATTERN
    assert config.output_name == "verse_code_database.md"
    assert config.retry_attempts >= 1


def test_from_env_reads_overrides(tmp_path):
    env = {
        "VERSE_DB_OUTPUT": str(tmp_path / "db.md"),
        "VERSE_DB_PATTERN": "*.digest.verse",
        "VERSE_DB_RETRY_ATTEMPTS": "7",
        "VERSE_DB_RETRY_DELAY": "0.05",
        "VERSE_DB_LOG_DIR": str(tmp_path / "logs"),
    }

    config = AggregatorConfig.from_env(env)

    assert config.output_path == tmp_path / "db.md"
    assert config.pattern == "*.digest.verse"
    assert config.retry_attempts == 7
    assert config.retry_delay == 0.05
    assert config.log_dir == str(tmp_path / "logs")


def test_from_env_rejects_bad_numbers():
    with pytest.raises(ValueError):
        AggregatorConfig.from_env({"VERSE_DB_RETRY_ATTEMPTS": "many"})
    with pytest.raises(ValueError):
        AggregatorConfig.from_env({"VERSE_DB_RETRY_DELAY": "soon"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pattern": " "},
        {"retry_attempts": 0},
        {"retry_delay": -1.0},
        {"output_path": ""},
    ],
)
def test_invalid_values_raise(kwargs):
    with pytest.raises(ValueError):
        AggregatorConfig(**kwargs)


def test_with_overrides_keeps_unset_fields(tmp_path):
    base = AggregatorConfig(output_path=tmp_path / "a.md", retry_attempts=9)

    updated = base.with_overrides(pattern="*.txt", log_to_file=False)

    assert updated.output_path == Path(tmp_path / "a.md")
    assert updated.pattern == "*.txt"
    assert updated.retry_attempts == 9
    assert updated.log_to_file is False


def test_well_known_paths_expand_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))

    config = AggregatorConfig(well_known_paths=("~/Documents/Fortnite Projects",))

    assert config.expanded_well_known_paths() == (tmp_path / "Documents" / "Fortnite Projects",)
