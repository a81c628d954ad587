# versedb/runtime/app_runner.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from versedb.config import AggregatorConfig
from versedb.discovery.project_locator import ProjectLocator, SearchMode
from versedb.logger import BasicLogger, configure_logging
from versedb.runtime.aggregation_writer import AggregationSummary, AggregationWriter
from versedb.ui.prompts import UserPrompt


@dataclass
class RunResult:
    mode: SearchMode
    projects: List[Path] = field(default_factory=list)
    summary: AggregationSummary = field(default_factory=AggregationSummary)
    output_path: Optional[Path] = None


class AppRunner:
    """
    One full aggregation pass: choose mode -> locate -> reset -> write.

    NoDirectorySelectedError and DatabaseResetError propagate to the caller;
    every other failure is contained inside the locator or the writer.
    """

    def __init__(
        self,
        config: AggregatorConfig,
        prompt: UserPrompt,
        locator: Optional[ProjectLocator] = None,
        writer: Optional[AggregationWriter] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        if logger is None:
            # reinstalled per run
            configure_logging(config.log_dir, config.log_to_file)
            logger = BasicLogger("AppRunner").get_logger()
        self.logger = logger
        self.locator = locator or ProjectLocator(config, prompt, logger=self.logger)
        self.writer = writer or AggregationWriter(config, logger=self.logger)

    def run(self, mode: Optional[SearchMode] = None) -> RunResult:
        if mode is None:
            mode = self.locator.choose_mode()
        self.logger.info("Search mode: %s", mode.value)

        projects = self.locator.locate(mode)
        if not projects:
            self.logger.warning("No Verse projects found.")

        summary = self.writer.run(projects)
        return RunResult(
            mode=mode,
            projects=projects,
            summary=summary,
            output_path=self.config.output_path,
        )
