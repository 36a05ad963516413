"""
Logging configuration for terrain-sprites.
"""

import copy
import logging
import logging.handlers
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..settings import AppSettings

CONSOLE_FORMAT = "%(asctime)s : %(levelname)-8s : %(message)s"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5
NOISY_LOGGERS = ("PIL", "PIL.PngImagePlugin")


class ColoredFormatter(logging.Formatter):
    """Console formatter that wraps the level name in ANSI colors."""

    RESET = "\033[0m"
    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        # Other handlers share the record, so color a copy
        colored = copy.copy(record)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


class CSVFormatter(logging.Formatter):
    """Semicolon separated rows: time; level; thread; logger; line; message.

    The thread column tells concurrent sprite loads apart.
    """

    @staticmethod
    def _quote(value: str) -> str:
        return '"' + value.replace('"', '""') + '"'

    def format(self, record: logging.LogRecord) -> str:
        fields = [
            self._quote(self.formatTime(record, self.datefmt)),
            record.levelname.ljust(8),
            self._quote(record.threadName or ""),
            self._quote(record.name),
            self._quote(str(record.lineno)),
            self._quote(record.getMessage()),
        ]
        return ";".join(fields)


def _console_handler(level_name: str, use_colors: bool) -> logging.Handler:
    formatter_cls = ColoredFormatter if use_colors else logging.Formatter
    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level_name, logging.WARNING))
    handler.setFormatter(formatter_cls(fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(log_path: Path) -> logging.Handler:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(CSVFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(settings: "AppSettings", console_level: Optional[str] = None) -> None:
    """
    Replace root handlers with the console and file handlers from settings.

    Args:
        settings: AppSettings instance for all logging configuration
        console_level: Level overriding the configured console level (optional)
    """
    level_name = (console_level or settings.console_log_level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    logging.getLogger("terrain_sprites").setLevel(logging.DEBUG)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    if settings.console_logging:
        root_logger.addHandler(_console_handler(level_name, settings.console_use_colors))

    log_path: Optional[Path] = None
    if settings.file_logging:
        try:
            log_path = Path(settings.log_file_path)
            root_logger.addHandler(_file_handler(log_path))
        except OSError as e:
            # Continue with console logging only
            log_path = None
            root_logger.warning(f"Could not setup file logging: {e}")

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)

    logger = logging.getLogger(__name__)
    logger.info("Logging initialized")
    if settings.console_logging:
        logger.debug(f"Console logging: {level_name} (colors: {settings.console_use_colors})")
    if log_path is not None:
        logger.debug(f"File logging: DEBUG at {log_path.absolute()}")
