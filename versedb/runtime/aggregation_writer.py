# versedb/runtime/aggregation_writer.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional, Set

from versedb.config import AggregatorConfig
from versedb.discovery.file_enumerator import FileEnumerator
from versedb.errors import DatabaseResetError, EnumerationError
from versedb.files.appender import ResilientAppender
from versedb.logger import BasicLogger

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
GENERATED_NOTICE = "*This file is automatically generated. Do not edit manually.*"


def render_header(generated_at: datetime) -> str:
    return (
        f"# Verse Code Database - Generated on {generated_at.strftime(TIMESTAMP_FORMAT)}\n"
        "\n"
        f"{GENERATED_NOTICE}\n"
        "\n"
    )


@dataclass
class AggregationSummary:
    projects_processed: int = 0
    projects_failed: int = 0
    files_written: int = 0
    files_skipped: int = 0


class AggregationWriter:
    """
    Owns the database file for one run.

    - reset(): truncate and write the generated header; failure is fatal.
    - write(projects): enumerate each project and append every matching file
      as `# File:` header, raw content, `# End of file:` footer.

    A file that cannot be read or appended is logged and skipped; if part of
    its segment was already appended, the file is cut back to where the
    segment started. A project that cannot be enumerated is logged and skipped.
    """

    def __init__(
        self,
        config: AggregatorConfig,
        appender: Optional[ResilientAppender] = None,
        enumerator: Optional[FileEnumerator] = None,
        now: Callable[[], datetime] = datetime.now,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.output_path = Path(config.output_path)
        self.logger = logger or BasicLogger(self.__class__.__name__).get_logger()
        self.appender = appender or ResilientAppender(
            max_attempts=config.retry_attempts,
            delay=config.retry_delay,
            logger=self.logger,
        )
        self.enumerator = enumerator or FileEnumerator(
            config.pattern, self.output_path, logger=self.logger
        )
        self.now = now

        # resolved paths already written this run; nested projects overlap
        self._written: Set[str] = set()

    # ----------------------------------------------------------------------
    # Phases
    # ----------------------------------------------------------------------
    def reset(self) -> None:
        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DatabaseResetError(f"Cannot create directory for {self.output_path}: {e}") from e

        if not self.appender.reset(self.output_path, render_header(self.now())):
            raise DatabaseResetError(f"Cannot reset database file {self.output_path}")

        self._written.clear()
        self.logger.info("Database reset: %s", self.output_path)

    def write(self, projects: Iterable[Path]) -> AggregationSummary:
        summary = AggregationSummary()

        for project in projects:
            self.logger.info("Processing project: %s", project)
            try:
                files = self.enumerator.enumerate(project)
            except (EnumerationError, OSError) as e:
                self.logger.warning("Skipping project %s: %s", project, e)
                summary.projects_failed += 1
                continue

            for fpath in files:
                key = os.path.normcase(os.path.realpath(fpath))
                if key in self._written:
                    continue

                if self._write_file(Path(fpath)):
                    self._written.add(key)
                    summary.files_written += 1
                else:
                    summary.files_skipped += 1

            summary.projects_processed += 1

        self.logger.info(
            "Processed %s project(s): %s file(s) written, %s skipped",
            summary.projects_processed,
            summary.files_written,
            summary.files_skipped,
        )
        return summary

    def run(self, projects: Iterable[Path]) -> AggregationSummary:
        self.reset()
        return self.write(projects)

    # ----------------------------------------------------------------------
    # Per file
    # ----------------------------------------------------------------------
    def _write_file(self, fpath: Path) -> bool:
        abs_path = fpath.resolve()
        try:
            with open(abs_path, "r", encoding="utf-8", newline="") as src:
                content = src.read()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning("Could not read %s: %s", abs_path, e)
            return False

        try:
            segment_start = os.path.getsize(self.output_path)
        except OSError as e:
            self.logger.warning("Skipping %s: cannot stat %s: %s", abs_path, self.output_path, e)
            return False

        parts = (
            f"# File: {abs_path}\n",
            f"{content}\n",
            f"\n# End of file: {abs_path.name}\n\n",
        )
        for index, part in enumerate(parts):
            if self.appender.append(self.output_path, part):
                continue

            self.logger.warning(
                "Skipping %s: could not append to %s",
                abs_path,
                self.output_path,
                extra={"path": str(abs_path)},
            )
            if index > 0:
                self._discard_segment(abs_path, segment_start)
            return False

        self.logger.debug("Appended %s", abs_path)
        return True

    def _discard_segment(self, abs_path: Path, segment_start: int) -> None:
        """Drop the partial segment this run appended for `abs_path`; earlier content is untouched."""
        if self.appender.truncate(self.output_path, segment_start):
            self.logger.info("Removed partial segment for %s", abs_path)
        else:
            self.logger.error(
                "Could not remove partial segment for %s; %s keeps an unterminated header",
                abs_path,
                self.output_path,
                extra={"path": str(abs_path)},
            )
