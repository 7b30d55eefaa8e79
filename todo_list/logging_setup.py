"""Logging configuration shared by every entry point."""

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - project logs pass through
    - uvicorn access/startup lines pass through
    - any other third-party logger only at WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("todo_list.") or name.startswith("uvicorn"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: int | str = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure the root logger with a filtered console handler and a file
    handler that keeps everything. Call once, before the first log line.

    Returns the path of the log file.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "todo.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return log_file
