# ABOUTME: Debug logging for spell success checks, to the terminal and a log file
# ABOUTME: Rotates weave_*.log files and records dice, events, and finished cast checks

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from rich.console import Console


LOG_PREFIX = "weave_"
KEEP_LOG_FILES = 10
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class TeeFile:
    """Console file that copies everything written to stdout into the log."""

    def __init__(self, file: TextIO, stdout: TextIO):
        self.file = file
        self.stdout = stdout

    def write(self, text: str) -> int:
        self.stdout.write(text)
        self.file.write(text)
        return len(text)

    def flush(self) -> None:
        self.stdout.flush()
        self.file.flush()

    def isatty(self) -> bool:
        return self.stdout.isatty()


class LoggingConfig:
    """
    Debug logging for one run.

    With debug disabled this does nothing beyond handing out a plain
    Console. With debug enabled it opens logs/weave_<timestamp>.log, prunes
    older logs down to the newest ten, and sends the root logger there.
    """

    def __init__(self, debug_enabled: bool = False, log_dir: Optional[Path] = None):
        """
        Args:
            debug_enabled: Whether to write a debug log
            log_dir: Directory for log files (defaults to ./logs)
        """
        self.debug_enabled = debug_enabled
        self.log_dir = Path(log_dir) if log_dir else Path("logs")
        self.log_file_path: Optional[Path] = None
        self.log_file: Optional[TextIO] = None
        self.tee_console: Optional[Console] = None
        self._event_counter = 0
        self._file_handler: Optional[logging.Handler] = None

        if debug_enabled:
            self._open_log()

    def _open_log(self) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._prune_old_logs()

        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file_path = self.log_dir / f"{LOG_PREFIX}{stamp}.log"
        self.log_file = open(self.log_file_path, 'w', encoding='utf-8', buffering=1)

        handler = logging.FileHandler(self.log_file_path, encoding='utf-8')
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

        root = logging.getLogger()
        root.setLevel(logging.DEBUG)
        root.addHandler(handler)
        self._file_handler = handler

    def _prune_old_logs(self) -> None:
        """Delete older logs so that, with the new one, KEEP_LOG_FILES remain."""
        existing = sorted(
            self.log_dir.glob(f"{LOG_PREFIX}*.log"),
            key=lambda p: p.stat().st_mtime,
            reverse=True
        )
        for stale in existing[KEEP_LOG_FILES - 1:]:
            try:
                stale.unlink()
            except OSError as e:
                logging.getLogger(__name__).error(f"Could not delete old log {stale}: {e}")

    def create_console(self) -> Console:
        """Rich console for the run; tees into the log file in debug mode."""
        if self.debug_enabled and self.log_file:
            self.tee_console = Console(
                file=TeeFile(self.log_file, sys.stdout),
                force_terminal=True,
                legacy_windows=False
            )
            return self.tee_console
        return Console()

    def log_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """
        Log an event with a running sequence number.

        Args:
            event_type: Event type name
            data: Event payload
        """
        if not self.debug_enabled:
            return
        self._event_counter += 1
        fields = ", ".join(f"{k}={v}" for k, v in data.items())
        logging.getLogger("weave_engine.events").info(
            f"[EVENT #{self._event_counter:03d}] {event_type}: {{{fields}}}"
        )

    def log_dice_roll(self, notation: str, rolls: List[int], total: int) -> None:
        """
        Log the faces and total of a roll.

        Args:
            notation: Dice notation, such as "1d100"
            rolls: Face shown by each die
            total: Sum of the faces
        """
        if not self.debug_enabled:
            return
        logging.getLogger("weave_engine.dice").info(f"[DICE] {notation} -> {rolls} = {total}")

    def log_cast_check(self, caster: str, spell: str, outcome: str, details: str = "") -> None:
        """
        Record how a cast attempt ended.

        Args:
            caster: Caster name
            spell: Spell name
            outcome: Final state of the attempt
            details: Bonus, target and choices made, if the check ran
        """
        if not self.debug_enabled:
            return
        msg = f"[CHECK] {caster} casting {spell}: {outcome}"
        if details:
            msg += f" ({details})"
        logging.getLogger("weave_engine.checks").info(msg)

    def get_log_file_path(self) -> Optional[Path]:
        return self.log_file_path

    def close(self) -> None:
        """Detach the file handler and close the log."""
        if self._file_handler:
            logging.getLogger().removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None
        if self.log_file:
            self.log_file.close()
            self.log_file = None


_logging_config: Optional[LoggingConfig] = None


def init_logging(debug_enabled: bool = False, log_dir: Optional[Path] = None) -> LoggingConfig:
    """Replace the global logging configuration, closing any previous one."""
    global _logging_config
    if _logging_config:
        _logging_config.close()
    _logging_config = LoggingConfig(debug_enabled, log_dir)
    return _logging_config


def get_logging_config() -> Optional[LoggingConfig]:
    """The global logging configuration, or None before init_logging."""
    return _logging_config


def reset_logging() -> None:
    global _logging_config
    if _logging_config:
        _logging_config.close()
    _logging_config = None
