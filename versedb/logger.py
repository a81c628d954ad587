# versedb/logger.py
import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

ROOT_NAME = "versedb"
LOG_FILE = "verse_db.jsonl"

_CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s [%(component)s] %(message)s"


class ComponentFilter(logging.Filter):
    """Sets record.component to the logger name without the `versedb.` prefix."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith(ROOT_NAME + "."):
            name = name[len(ROOT_NAME) + 1:]
        record.component = name
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, component, message and any extra={...} fields."""

    _standard_keys = set(
        vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
    ) | {"message", "asctime", "component", "taskName"}

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "component": getattr(record, "component", record.name),
            "message": record.getMessage(),
        }

        # path / attempt and similar
        for key, value in record.__dict__.items():
            if key not in self._standard_keys:
                entry[key] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(
    log_dir: str = "logs",
    log_to_file: bool = True,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    (Re)install the console handler and, optionally, the rotating JSON file
    handler on the `versedb` logger. Handlers from an earlier call are closed
    and replaced, so every run logs where its own config says.
    """
    root = logging.getLogger(ROOT_NAME)
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, "_versedb_owned", False):
            root.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    handlers = [console_handler]

    if log_to_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            Path(log_dir) / LOG_FILE,
            maxBytes=5_000_000,  # 5 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(JsonFormatter())
        handlers.append(file_handler)

    for handler in handlers:
        handler.addFilter(ComponentFilter())
        handler._versedb_owned = True
        root.addHandler(handler)

    return root


class BasicLogger:
    """
    Named logger under `versedb`. Passing `log_to_file` reconfigures the
    shared handlers; otherwise console logging is set up on first use only.
    """

    def __init__(
        self,
        name: str,
        level: Optional[int] = None,
        log_to_file: Optional[bool] = None,
        log_dir: Optional[str] = None,
    ):
        self.logger = logging.getLogger(f"{ROOT_NAME}.{name}")

        if log_to_file is not None:
            configure_logging(log_dir or "logs", log_to_file, level or logging.INFO)
        elif not logging.getLogger(ROOT_NAME).handlers:
            configure_logging(log_to_file=False, level=level or logging.INFO)

    def get_logger(self) -> logging.Logger:
        return self.logger
