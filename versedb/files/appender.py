# === CONTEXT START ===
# Exclusive-write primitive for the database file plus the retry policy that
# sits on top of it.
#
# FileAppender performs exactly one attempt: open the file without truncating
# it, take an exclusive lock, then append / reset / truncate, release. It never
# raises for I/O problems; it reports AppendStatus.LOCKED when another process
# holds the file and AppendStatus.FAILED for anything else. Existing content is
# only cut after the lock is held.
#
# ResilientAppender retries LOCKED results a fixed number of times with a fixed
# delay. Any object with append/reset/truncate methods returning AppendStatus
# can be plugged in underneath it, which is how tests simulate lock contention.
# === CONTEXT END ===
from __future__ import annotations

import errno
import logging
import os
import time
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Union

from versedb.logger import BasicLogger

if os.name == "nt":
    import msvcrt
else:
    import fcntl

PathLike = Union[str, Path]

# ERROR_SHARING_VIOLATION / ERROR_LOCK_VIOLATION
_WINDOWS_LOCK_ERRORS = {32, 33}
_LOCK_ERRNOS = {errno.EAGAIN, errno.EACCES, errno.EWOULDBLOCK}


class AppendStatus(Enum):
    OK = "ok"
    LOCKED = "locked"
    FAILED = "failed"


def _is_sharing_violation(exc: OSError) -> bool:
    return getattr(exc, "winerror", None) in _WINDOWS_LOCK_ERRORS


def _lock(handle) -> int:
    fd = handle.fileno()
    if os.name == "nt":
        pos = handle.tell()
        msvcrt.locking(fd, msvcrt.LK_NBLCK, 1)
        return pos
    fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    return 0


def _unlock(handle, pos: int) -> None:
    fd = handle.fileno()
    if os.name == "nt":
        handle.seek(pos)
        msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)
    else:
        fcntl.flock(fd, fcntl.LOCK_UN)


class FileAppender:
    """
    One exclusive attempt against a file on disk.
    Text is written with newline translation disabled so content stays verbatim.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or BasicLogger(self.__class__.__name__).get_logger()

    def append(self, path: PathLike, text: str) -> AppendStatus:
        return self._locked(path, "a", lambda handle: handle.write(text))

    def reset(self, path: PathLike, text: str) -> AppendStatus:
        """Replace the whole content with `text`. The file is cut only once the lock is held."""

        def _rewrite(handle) -> None:
            handle.seek(0)
            handle.truncate(0)
            handle.write(text)

        return self._locked(path, "a", _rewrite)

    def truncate(self, path: PathLike, size: int) -> AppendStatus:
        """Cut the file back to `size` bytes."""
        return self._locked(path, "ab", lambda handle: handle.truncate(size))

    def _locked(self, path: PathLike, mode: str, operation: Callable[[Any], Any]) -> AppendStatus:
        try:
            if "b" in mode:
                handle = open(path, mode)
            else:
                handle = open(path, mode, encoding="utf-8", newline="")
        except OSError as e:
            if _is_sharing_violation(e):
                return AppendStatus.LOCKED
            self.logger.debug("Open failed for %s: %s", path, e)
            return AppendStatus.FAILED

        with handle:
            try:
                pos = _lock(handle)
            except OSError as e:
                if isinstance(e, BlockingIOError) or e.errno in _LOCK_ERRNOS or _is_sharing_violation(e):
                    return AppendStatus.LOCKED
                self.logger.debug("Lock failed for %s: %s", path, e)
                return AppendStatus.FAILED

            try:
                operation(handle)
                handle.flush()
            except OSError as e:
                self.logger.debug("Write failed for %s: %s", path, e)
                return AppendStatus.FAILED
            finally:
                try:
                    _unlock(handle, min(pos, handle.tell()))
                except OSError:
                    # closing the handle releases the lock anyway
                    pass

        return AppendStatus.OK


class ResilientAppender:
    """Retry wrapper: LOCKED is retried, FAILED and exhaustion are returned to the caller."""

    def __init__(
        self,
        appender=None,
        max_attempts: int = 5,
        delay: float = 0.2,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.logger = logger or BasicLogger(self.__class__.__name__).get_logger()
        self.appender = appender or FileAppender(logger=self.logger)
        self.max_attempts = max_attempts
        self.delay = delay
        self.sleep = sleep

    def append(self, path: PathLike, text: str) -> bool:
        return self._attempt(lambda: self.appender.append(path, text), path)

    def reset(self, path: PathLike, text: str) -> bool:
        return self._attempt(lambda: self.appender.reset(path, text), path)

    def truncate(self, path: PathLike, size: int) -> bool:
        return self._attempt(lambda: self.appender.truncate(path, size), path)

    def _attempt(self, operation: Callable[[], AppendStatus], path: PathLike) -> bool:
        for attempt in range(1, self.max_attempts + 1):
            status = operation()

            if status is AppendStatus.OK:
                return True

            if status is AppendStatus.FAILED:
                self.logger.warning("Write to %s failed (not a lock error)", path)
                return False

            if attempt < self.max_attempts:
                self.logger.info(
                    "%s is locked, retrying (%s/%s)",
                    path,
                    attempt,
                    self.max_attempts,
                    extra={"path": str(path), "attempt": attempt},
                )
                self.sleep(self.delay)

        self.logger.warning("%s still locked after %s attempts", path, self.max_attempts)
        return False
