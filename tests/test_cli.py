# tests/test_cli.py
from __future__ import annotations

import pytest

import cli
from versedb.logger import configure_logging
from tests.conftest import write_file


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("VERSE_DB_OUTPUT", "VERSE_DB_PATTERN", "VERSE_DB_RETRY_ATTEMPTS", "VERSE_DB_RETRY_DELAY", "VERSE_DB_LOG_DIR"):
        monkeypatch.delenv(name, raising=False)


def test_directory_flag_runs_without_prompts(tmp_project_root, tmp_path):
    write_file(tmp_project_root / "game.verse", "game := 1")
    output = tmp_path / "db.md"

    code = cli.main(["--directory", str(tmp_project_root), "--output", str(output), "--no-log-file"])

    assert code == 0
    text = output.read_text(encoding="utf-8")
    assert "game := 1" in text
    assert "# End of file: game.verse" in text


def test_missing_directory_is_rejected_before_reset(tmp_path):
    output = tmp_path / "db.md"
    output.write_text("previous database\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--directory", str(tmp_path / "nope"), "--output", str(output), "--no-log-file"])

    assert exc_info.value.code == 2
    assert output.read_text(encoding="utf-8") == "previous database\n"


def test_each_run_logs_where_its_config_says(tmp_project_root, tmp_path, monkeypatch):
    write_file(tmp_project_root / "game.verse", "game := 1")
    output = tmp_path / "db.md"
    log_dir = tmp_path / "run-logs"

    assert cli.main(["--directory", str(tmp_project_root), "--output", str(output), "--no-log-file"]) == 0
    assert not log_dir.exists()

    monkeypatch.setenv("VERSE_DB_LOG_DIR", str(log_dir))
    assert cli.main(["--directory", str(tmp_project_root), "--output", str(output)]) == 0

    assert (log_dir / "verse_db.jsonl").read_text(encoding="utf-8").strip()
    configure_logging(log_to_file=False)


def test_invalid_env_config_aborts(monkeypatch):
    monkeypatch.setenv("VERSE_DB_RETRY_ATTEMPTS", "lots")

    assert cli.main(["--no-log-file", "--directory", "."]) == 1


def test_reset_failure_aborts(tmp_path):
    # the output's parent is a regular file, so the database cannot be created
    blocker = write_file(tmp_path / "blocker", "")

    code = cli.main(["--directory", str(tmp_path), "--output", str(blocker / "db.md"), "--no-log-file"])

    assert code == 1


def test_directory_and_scan_all_are_exclusive():
    with pytest.raises(SystemExit):
        cli.main(["--directory", ".", "--scan-all"])
