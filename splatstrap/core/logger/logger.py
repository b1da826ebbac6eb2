"""
Run Logging Configuration.

The provisioner logs to the console from the first line and, once
ProvisionOrchestrator has created the per-workdir state directory, also to
a rotating log file under ``.splatstrap/logs``. Configuring a logger name
again replaces its handlers, so the console-only bootstrap and the
file-backed run logger never print twice.

Console output is colored only on a TTY; the file always gets plain text.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

from ..paths import LOGGER_NAME
from .styles import LogStyle

_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Separator characters used to detect decorative lines
_SEPARATOR_CHARS = {"━", "═", "─"}

# Section tags like [HOST] or [Usage], but not data brackets like [!]
_SUBTITLE_RE = re.compile(r"\[([A-Za-z][A-Za-z ]*)\]")


class ColorFormatter(logging.Formatter):
    """Formatter that colors console lines by step outcome and layout role.

    The ``asctime - LEVEL -`` prefix stays plain; only the level name and
    the message text are colored:
        - WARNING/ERROR/CRITICAL: level name in yellow/red
        - Step outcome glyphs: ✓ green, ✗ red, ⚠ yellow, ↷ dim
        - Separator lines: dim
        - Upper-case phase headers: bold magenta
        - Section tags like [HOST], [Usage]: bold magenta
        - Echoed commands (``$ git clone ...``, DEBUG only): cyan
    """

    _LEVEL_COLORS = {
        logging.WARNING: LogStyle.YELLOW,
        logging.ERROR: LogStyle.RED,
        logging.CRITICAL: LogStyle.RED + LogStyle.BOLD,
    }

    # Checked in order; a failure glyph wins over a success glyph on the same line
    _GLYPH_COLORS = (
        (LogStyle.FAILURE, LogStyle.RED),
        (LogStyle.WARNING, LogStyle.YELLOW),
        (LogStyle.SUCCESS, LogStyle.GREEN),
        (LogStyle.SKIP, LogStyle.DIM),
    )

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        msg = record.getMessage()

        level_color = self._LEVEL_COLORS.get(record.levelno)
        if level_color:
            formatted = formatted.replace(
                record.levelname, f"{level_color}{record.levelname}{LogStyle.RESET}", 1
            )

        if record.levelno == logging.WARNING:
            return self._paint(formatted, msg, LogStyle.YELLOW)

        if record.levelno == logging.DEBUG and msg.startswith("$ "):
            return self._paint(formatted, msg, LogStyle.CYAN)

        if record.levelno == logging.INFO:
            color = self._info_color(msg)
            if color:
                return self._paint(formatted, msg, color)

        if _SUBTITLE_RE.search(msg):
            idx = formatted.find(msg)
            if idx != -1:
                tagged = _SUBTITLE_RE.sub(
                    rf"{LogStyle.BOLD}{LogStyle.MAGENTA}\g<0>{LogStyle.RESET}", formatted[idx:]
                )
                formatted = formatted[:idx] + tagged

        return formatted

    def _info_color(self, msg: str) -> str | None:
        """Color for a whole INFO line, or None to leave it plain."""
        stripped = msg.strip()
        if not stripped:
            return None
        if all(c in _SEPARATOR_CHARS for c in stripped):
            return LogStyle.DIM
        if stripped == stripped.upper() and len(stripped) > 5 and any(c.isalpha() for c in stripped):
            return LogStyle.BOLD + LogStyle.MAGENTA
        for glyph, color in self._GLYPH_COLORS:
            if glyph in msg:
                return color
        return None

    @staticmethod
    def _paint(formatted: str, msg: str, color: str) -> str:
        """Apply *color* to the message portion of *formatted* only."""
        idx = formatted.find(msg)
        if idx == -1:
            return formatted
        return f"{formatted[:idx]}{color}{formatted[idx:]}{LogStyle.RESET}"


class Logger:
    """
    Console plus optional rotating-file configuration for one logger name.

    Constructing a Logger (re)configures ``logging.getLogger(name)``:
    existing handlers are closed and replaced, the console handler is always
    attached, and a rotating file handler is added when ``log_dir`` is set.

    Attributes:
        name (str): Logger identifier (normally LOGGER_NAME)
        log_dir (Path | None): Directory for the run's log file (None = console only)
        level (int): Logging level
        max_bytes (int): Size at which the log file rotates (default: 5MB)
        backup_count (int): Rotated files kept (default: 5)

    Example:
        >>> log = Logger.setup(name=LOGGER_NAME, log_dir=Path(".splatstrap/logs"))
        >>> Logger.get_log_file()
        PosixPath('.splatstrap/logs/Splatstrap_20260101_120000.log')
    """

    _active_log_file: Path | None = None

    def __init__(
        self,
        name: str = LOGGER_NAME,
        log_dir: Path | None = None,
        level: int = logging.INFO,
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 5,
    ) -> None:
        self.name = name
        self.log_dir = log_dir
        self.level = level
        self.max_bytes = max_bytes
        self.backup_count = backup_count

        self._log = logging.getLogger(name)
        self._configure()

    def _configure(self) -> None:
        self._log.setLevel(self.level)
        self._log.propagate = False

        for handler in self._log.handlers[:]:
            handler.close()
            self._log.removeHandler(handler)

        plain = logging.Formatter(_FORMAT, _DATEFMT)
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(ColorFormatter(_FORMAT, _DATEFMT) if sys.stdout.isatty() else plain)
        self._log.addHandler(console)

        if self.log_dir is None:
            Logger._active_log_file = None
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        filename = self.log_dir / f"{self.name}_{timestamp}.log"
        file_handler = RotatingFileHandler(
            filename, maxBytes=self.max_bytes, backupCount=self.backup_count, encoding="utf-8"
        )
        file_handler.setFormatter(plain)
        self._log.addHandler(file_handler)
        Logger._active_log_file = filename

    def get_logger(self) -> logging.Logger:
        """Returns the configured logging.Logger instance."""
        return self._log

    @classmethod
    def get_log_file(cls) -> Path | None:
        """Log file of the most recent file-backed configuration, if any."""
        return cls._active_log_file

    @classmethod
    def setup(
        cls, name: str, log_dir: Path | None = None, level: str = "INFO", **kwargs
    ) -> logging.Logger:
        """
        Configure *name* and return it; called by ProvisionOrchestrator.

        Args:
            name: Logger identifier (normally LOGGER_NAME)
            log_dir: Directory for the log file (None = console only)
            level: Level name; unknown names fall back to INFO
            **kwargs (Any): Passed through to the Logger constructor

        Environment Variables:
            DEBUG: "1" forces DEBUG level, which also echoes every command run
        """
        if os.getenv("DEBUG") == "1":
            numeric_level = logging.DEBUG
        else:
            numeric_level = getattr(logging, level.upper(), logging.INFO)

        return cls(name=name, log_dir=log_dir, level=numeric_level, **kwargs).get_logger()
