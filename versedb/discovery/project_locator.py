# versedb/discovery/project_locator.py
from __future__ import annotations

import fnmatch
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set

import psutil

from versedb.config import AggregatorConfig
from versedb.errors import NoDirectorySelectedError
from versedb.logger import BasicLogger
from versedb.ui.prompts import UserPrompt


class SearchMode(Enum):
    EXPLICIT_DIRECTORY = "explicit_directory"
    WHOLE_FILESYSTEM_SCAN = "whole_filesystem_scan"


MODE_LABELS = {
    SearchMode.EXPLICIT_DIRECTORY: "Choose a project folder",
    SearchMode.WHOLE_FILESYSTEM_SCAN: "Scan every drive for Verse files",
}


def list_volumes() -> List[str]:
    """Mount points of the currently mounted physical volumes."""
    return [part.mountpoint for part in psutil.disk_partitions(all=False)]


def _path_key(path: Path) -> str:
    return os.path.normcase(os.path.normpath(os.path.abspath(path)))


class ProjectLocator:
    """
    Produces the ordered, de-duplicated list of project directories for a run.

    Whole-filesystem mode is best effort: a volume that cannot be listed or
    walked contributes nothing and the scan moves on to the next one.
    """

    def __init__(
        self,
        config: AggregatorConfig,
        prompt: UserPrompt,
        volume_lister: Callable[[], Iterable[str]] = list_volumes,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.prompt = prompt
        self.volume_lister = volume_lister
        self.logger = logger or BasicLogger(self.__class__.__name__).get_logger()

    def choose_mode(self) -> SearchMode:
        modes = list(MODE_LABELS)
        index = self.prompt.choose_option(
            "How should Verse projects be located?",
            [MODE_LABELS[m] for m in modes],
        )
        return modes[index]

    def locate(self, mode: SearchMode) -> List[Path]:
        if mode is SearchMode.EXPLICIT_DIRECTORY:
            return self._locate_explicit()
        return self._locate_everywhere()

    def _locate_explicit(self) -> List[Path]:
        chosen = self.prompt.choose_directory("Select the folder containing your Verse project")
        if not chosen:
            raise NoDirectorySelectedError("No directory selected.")

        path = Path(chosen).resolve()
        self.logger.info("Using project directory: %s", path)
        return [path]

    def _locate_everywhere(self) -> List[Path]:
        projects: List[Path] = []
        seen: Set[str] = set()

        def _add(path: Path) -> None:
            key = _path_key(path)
            if key in seen:
                return
            seen.add(key)
            projects.append(path)

        for candidate in self.config.expanded_well_known_paths():
            if candidate.is_dir():
                self.logger.info("Found well-known location: %s", candidate)
                _add(candidate)

        try:
            volumes = list(self.volume_lister())
        except (OSError, psutil.Error) as e:
            self.logger.warning("Could not list mounted volumes: %s", e)
            volumes = []

        for volume in volumes:
            self.logger.info("Scanning volume %s for %s", volume, self.config.pattern)
            try:
                for directory in self._scan_volume(volume):
                    _add(directory)
            except OSError as e:
                self.logger.warning("Skipping volume %s: %s", volume, e)

        self.logger.info("Located %s project director%s", len(projects), "y" if len(projects) == 1 else "ies")
        return projects

    def _scan_volume(self, volume: str) -> Iterable[Path]:
        if not os.path.isdir(volume):
            raise NotADirectoryError(f"Volume root is not a directory: {volume}")

        def _on_error(err: OSError) -> None:
            self.logger.debug("Unreadable path during scan: %s", err.filename)

        for dirpath, _, filenames in os.walk(volume, onerror=_on_error):
            if any(fnmatch.fnmatch(f, self.config.pattern) for f in filenames):
                yield Path(dirpath)
