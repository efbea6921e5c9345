"""Console and file logging for the CLI and API server.

The console shows warnings from everyone plus INFO from snalab itself, with
the level name coloured. The file log keeps everything down to DEBUG,
including the per-phase timings from ``snalab.profiling``.
"""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from snalab.config import get_log_dir

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
LOG_FILE_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5

QUIET_LIBRARIES = ("werkzeug", "urllib3")


class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


LEVEL_COLORS = {
    logging.DEBUG: Colors.CYAN,
    logging.INFO: Colors.GREEN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.BOLD + Colors.RED,
}


class ColoredFormatter(logging.Formatter):
    """Colours the level name; the rest of the line stays plain."""

    def format(self, record):
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return super().format(record)
        original = record.levelname
        record.levelname = f"{color}{original}{Colors.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class ConsoleFilter(logging.Filter):
    """Warnings pass; INFO only from our own loggers, minus the timing chatter."""

    own_prefixes = ("snalab", "__main__")
    muted_prefixes = ("snalab.profiling",)

    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        if record.levelno != logging.INFO:
            return False
        if record.name.startswith(self.muted_prefixes):
            return False
        return record.name.startswith(self.own_prefixes)


def build_console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    handler.addFilter(ConsoleFilter())
    return handler


def build_file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=LOG_FILE_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(
    console_level=logging.INFO,
    file_level=logging.DEBUG,
    quiet=False,
    log_dir: Optional[Path] = None,
    log_name: str = "snalab.log",
):
    """Replace the root logger's handlers with a console and a rotating file handler.

    ``quiet`` skips the console handler (used when stdout carries JSON).
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if not quiet:
        root.addHandler(build_console_handler(console_level))

    log_dir = log_dir or get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / log_name
    root.addHandler(build_file_handler(log_path, file_level))

    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging initialized (file: %s).", log_path)
