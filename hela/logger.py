"""
HELA Logging

Diagnostics for the client. Records go to stderr through a rich handler (or
a plain stream handler when highlighting is off), and optionally to a
rotating file under the config directory. Command output never goes
through here; it is written by the CLI layer with click.

Usage:
    >>> from hela.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Connecting to %s", network.rpc)
"""

import logging
import logging.handlers
import re
import sys
import threading
import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.highlighter import RegexHighlighter
from rich.logging import RichHandler
from rich.theme import Theme

from .constants import (
    DEFAULT_CONFIG_DIR,
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_HIGHLIGHTING,
    LOG_DATE_FORMAT,
    LOG_FILE_OUTPUT,
    LOG_FORMAT,
    LOG_LEVEL,
    LOG_MAX_FILE_SIZE,
)

LOG_FILE_PATH = DEFAULT_CONFIG_DIR / "logs" / "hela.log"

# Libraries whose INFO chatter would drown the client's own records
QUIET_LOGGERS = ("httpx", "httpcore")

HELA_THEME = Theme({
    "hela.address": "cyan",
    "hela.method":  "bold white",
    "hela.round":   "bold yellow",
    "hela.url":     "cyan",
})


class TerminalSafeFormatter(logging.Formatter):
    """
    Formatter that drops ANSI escapes and control characters.

    Node error messages end up in log records verbatim and must not be able
    to drive the terminal.
    """

    _ansi_re = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b[@-Z\\-_]")
    # Everything below 0x20 except tab and newline, plus DEL
    _control_re = re.compile(r"[\x00-\x08\x0B-\x1F\x7F]")

    @classmethod
    def sanitize(cls, text: str) -> str:
        if not text:
            return text
        return cls._control_re.sub("", cls._ansi_re.sub("", text))

    def format(self, record: logging.LogRecord) -> str:
        return self.sanitize(super().format(record))


class HelaLogHighlighter(RegexHighlighter):
    """Colors addresses, RPC methods, rounds and URLs in console records."""

    base_style = "hela."
    highlights = [
        r"(?P<address>\boasis1[02-9ac-hj-np-z]{39}\b)",
        r"(?P<method>\b(?:accounts|consensus|runtime|core)\.[A-Z]\w+\b)",
        r"\bround (?P<round>\d+)",
        r"(?P<url>https?://\S+)",
    ]


class LogManager:
    """
    Owns the root logger setup. Configuration happens once per process;
    only the level can change afterwards.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._configured = False

    def configure(
        self,
        log_level: Optional[str] = None,
        log_file: Optional[Path] = None,
        file_output: Optional[bool] = None,
    ) -> None:
        """
        Attach the console handler and, when enabled, the rotating file handler.

        Args:
            log_level: Level name; defaults to LOG_LEVEL from the environment
            log_file: Log file path; defaults to `<config dir>/logs/hela.log`
            file_output: Write to the log file; defaults to LOG_FILE_OUTPUT
        """
        with self._lock:
            if self._configured:
                return

            level = getattr(logging, str(log_level or LOG_LEVEL).upper(), logging.WARNING)
            root = logging.getLogger()
            root.setLevel(level)
            root.handlers.clear()
            for name in QUIET_LOGGERS:
                logging.getLogger(name).setLevel(logging.WARNING)

            formatter = TerminalSafeFormatter(fmt=str(LOG_FORMAT), datefmt=f"{LOG_DATE_FORMAT} UTC")
            formatter.converter = time.gmtime

            if LOG_CONSOLE_HIGHLIGHTING:
                console = RichHandler(
                    console=Console(theme=HELA_THEME, highlight=False, stderr=True),
                    highlighter=HelaLogHighlighter(),
                    show_path=False,
                    show_time=False,
                    show_level=False,
                    markup=False,
                )
            else:
                console = logging.StreamHandler(sys.stderr)
            console.setFormatter(formatter)
            root.addHandler(console)

            if file_output is None:
                file_output = bool(LOG_FILE_OUTPUT)
            if file_output:
                path = log_file or LOG_FILE_PATH
                path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.handlers.RotatingFileHandler(
                    str(path),
                    maxBytes=LOG_MAX_FILE_SIZE,
                    backupCount=LOG_BACKUP_COUNT,
                    encoding="utf-8",
                )
                file_handler.setFormatter(formatter)
                root.addHandler(file_handler)

            self._configured = True

    def set_level(self, log_level: str) -> None:
        """
        Raises:
            ValueError: Unknown level name
        """
        level = getattr(logging, str(log_level).upper(), None)
        if not isinstance(level, int):
            raise ValueError(f"Invalid log level: {log_level}")
        root = logging.getLogger()
        root.setLevel(level)
        for handler in root.handlers:
            handler.setLevel(level)

    def get_logger(self, name: str) -> logging.Logger:
        self.configure()
        return logging.getLogger(name)


_manager = LogManager()


def get_logger(name: str) -> logging.Logger:
    """Module logger; configures logging on first use."""
    return _manager.get_logger(name)


def set_log_level(log_level: str) -> None:
    """Adjust the active level (the root `--log-level` option)."""
    _manager.set_level(log_level)
