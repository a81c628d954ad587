# versedb/discovery/file_enumerator.py
from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from versedb.errors import EnumerationError
from versedb.logger import BasicLogger


def _normalize(path: Union[str, Path]) -> str:
    return os.path.normcase(os.path.realpath(path))


class FileEnumerator:
    """
    Recursively collects files matching `pattern` under a project directory,
    skipping the output database so a run never ingests its own output.
    """

    def __init__(self, pattern: str, output_path: Union[str, Path], logger: Optional[logging.Logger] = None):
        self.pattern = pattern
        self.output_path = Path(output_path)
        self._output_name = os.path.normcase(self.output_path.name)
        self._output_real = _normalize(self.output_path)
        self.logger = logger or BasicLogger(self.__class__.__name__).get_logger()

    def matches(self, name: str) -> bool:
        return fnmatch.fnmatch(name, self.pattern)

    def is_output(self, path: Union[str, Path]) -> bool:
        if os.path.normcase(os.path.basename(path)) == self._output_name:
            return True
        return _normalize(path) == self._output_real

    def enumerate(self, project: Union[str, Path]) -> List[Path]:
        """
        Return matching files in traversal order.

        Raises EnumerationError if the project root itself cannot be listed.
        Unreadable subdirectories below the root are logged and skipped.
        """
        root = os.path.abspath(project)
        if not os.path.isdir(root):
            raise EnumerationError(root, "not a directory")

        try:
            # os.walk swallows a failing root silently; list it first
            with os.scandir(root):
                pass
        except OSError as e:
            raise EnumerationError(root, str(e)) from e

        def _on_error(err: OSError) -> None:
            self.logger.warning(
                "Skipping unreadable directory %s: %s",
                err.filename,
                err.strerror or err,
            )

        files: List[Path] = []
        for dirpath, _, filenames in os.walk(root, onerror=_on_error):
            for fname in filenames:
                if not self.matches(fname):
                    continue

                full_path = os.path.join(dirpath, fname)
                if not os.path.isfile(full_path):
                    continue
                if self.is_output(full_path):
                    continue

                files.append(Path(full_path))

        return files
