"""
Logging for the auction engine.

Every module logs through a child of the `dutchauction` logger, e.g.
`dutchauction.auction` or `dutchauction.settlement`. Console output is
colored with colorlog; a plain-text `dutchauction.log` is written as well
when file logging is enabled.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog


ROOT_LOGGER = "dutchauction"
LOG_FILE = "dutchauction.log"

LINE_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
CONSOLE_FORMAT = "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _console_handler(level: int) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        colorlog.ColoredFormatter(
            CONSOLE_FORMAT,
            datefmt=DATE_FORMAT,
            log_colors=LEVEL_COLORS,
        )
    )
    return handler


def _file_handler(level: int, log_dir: Path) -> logging.Handler:
    log_dir.mkdir(exist_ok=True, parents=True)
    handler = logging.FileHandler(log_dir / LOG_FILE)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LINE_FORMAT, datefmt=DATE_FORMAT))
    return handler


class AuctionLogger:
    """Owns the handlers attached to the `dutchauction` logger."""

    _initialized = False
    _log_dir: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
    ):
        """
        Attach handlers once; later calls are no-ops until reset().

        Args:
            level: Threshold for the logger and its handlers
            log_dir: Where dutchauction.log goes (default ./logs)
            log_to_file: Also write plain-text lines to the log file
        """
        if cls._initialized:
            return

        root = logging.getLogger(ROOT_LOGGER)
        root.setLevel(level)
        root.handlers.clear()
        root.addHandler(_console_handler(level))

        if log_to_file:
            cls._log_dir = Path(log_dir) if log_dir else Path("logs")
            root.addHandler(_file_handler(level, cls._log_dir))

        cls._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Close and detach handlers so the next setup() starts fresh."""
        root = logging.getLogger(ROOT_LOGGER)
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()
        cls._initialized = False
        cls._log_dir = None

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Child logger `dutchauction.<name>`, configuring defaults on first use."""
        if not cls._initialized:
            cls.setup()
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def get_logger(name: str) -> logging.Logger:
    return AuctionLogger.get_logger(name)


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
):
    """Reconfigure logging, replacing whatever an earlier setup attached."""
    AuctionLogger.reset()
    AuctionLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file)
