# versedb/config/aggregator_config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional, Tuple

DEFAULT_OUTPUT_NAME = "verse_code_database.md"
DEFAULT_PATTERN = "*.verse"

# Conventional UEFN / Fortnite locations, checked before the volume scan.
WELL_KNOWN_PATHS: Tuple[str, ...] = (
    "~/Documents/Fortnite Projects",
    "%LOCALAPPDATA%/UnrealEditorFortnite/Saved/VerseProject",
    "C:/Program Files/Epic Games/Fortnite/FortniteGame/Plugins",
)

ENV_OUTPUT = "VERSE_DB_OUTPUT"
ENV_PATTERN = "VERSE_DB_PATTERN"
ENV_RETRY_ATTEMPTS = "VERSE_DB_RETRY_ATTEMPTS"
ENV_RETRY_DELAY = "VERSE_DB_RETRY_DELAY"
ENV_LOG_DIR = "VERSE_DB_LOG_DIR"


@dataclass(frozen=True)
class AggregatorConfig:
    """Runtime settings for one aggregation run.

    The output path is carried explicitly instead of being derived from the
    working directory inside the components, so a run can target any
    directory (tests point it at tmp_path).
    """

    output_path: Path = field(default_factory=lambda: Path.cwd() / DEFAULT_OUTPUT_NAME)
    pattern: str = DEFAULT_PATTERN
    well_known_paths: Tuple[str, ...] = WELL_KNOWN_PATHS
    retry_attempts: int = 5
    retry_delay: float = 0.2
    log_dir: str = "logs"
    log_to_file: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "output_path", Path(self.output_path))
        object.__setattr__(self, "well_known_paths", tuple(self.well_known_paths))

        if not str(self.output_path) or self.output_path.name == "":
            raise ValueError("output_path must name a file")
        if not isinstance(self.pattern, str) or not self.pattern.strip():
            raise ValueError("pattern must be a non-empty string")
        if not isinstance(self.retry_attempts, int) or self.retry_attempts < 1:
            raise ValueError("retry_attempts must be a positive integer")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be non-negative")

    @property
    def output_name(self) -> str:
        return self.output_path.name

    def expanded_well_known_paths(self) -> Tuple[Path, ...]:
        return tuple(
            Path(os.path.expandvars(os.path.expanduser(p))) for p in self.well_known_paths
        )

    def with_overrides(
        self,
        output_path: Optional[str] = None,
        pattern: Optional[str] = None,
        log_to_file: Optional[bool] = None,
    ) -> "AggregatorConfig":
        changes = {}
        if output_path:
            changes["output_path"] = Path(output_path)
        if pattern:
            changes["pattern"] = pattern
        if log_to_file is not None:
            changes["log_to_file"] = log_to_file
        return replace(self, **changes)

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "AggregatorConfig":
        env = os.environ if environ is None else environ

        kwargs = {}
        output = env.get(ENV_OUTPUT)
        if output:
            kwargs["output_path"] = Path(output).expanduser()

        pattern = env.get(ENV_PATTERN)
        if pattern:
            kwargs["pattern"] = pattern

        attempts = env.get(ENV_RETRY_ATTEMPTS)
        if attempts:
            try:
                kwargs["retry_attempts"] = int(attempts)
            except ValueError:
                raise ValueError(f"{ENV_RETRY_ATTEMPTS} must be an integer, got {attempts!r}") from None

        delay = env.get(ENV_RETRY_DELAY)
        if delay:
            try:
                kwargs["retry_delay"] = float(delay)
            except ValueError:
                raise ValueError(f"{ENV_RETRY_DELAY} must be a number, got {delay!r}") from None

        log_dir = env.get(ENV_LOG_DIR)
        if log_dir:
            kwargs["log_dir"] = log_dir

        return AggregatorConfig(**kwargs)
