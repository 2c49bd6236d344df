"""
Logging setup for the Startup Ecosystem Graph.

One console handler on the root logger, plus rotating files when
LOG_FILE_ENABLED is set. Modules get their logger through ``get_logger``.
"""
import logging
import logging.handlers
import sys
from pathlib import Path

from startup_graph.config.config import settings

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

JSON_FORMAT = '{"timestamp":"%(asctime)s", "level":"%(levelname)s", "name":"%(name)s", "message":"%(message)s"}'
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024


class LogManager:
    """Configures the root logger once per process."""

    _initialized = False
    _root_logger = None

    @staticmethod
    def _build_formatter() -> logging.Formatter:
        if settings.LOG_FORMAT.lower() == "json":
            return logging.Formatter(JSON_FORMAT)
        return logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    @staticmethod
    def _add_file_handlers(root_logger: logging.Logger, formatter: logging.Formatter, level: int) -> None:
        log_dir = Path(settings.LOG_FILE_PATH)
        log_dir.mkdir(parents=True, exist_ok=True)

        error_handler = logging.handlers.RotatingFileHandler(
            log_dir / "error.log", maxBytes=MAX_LOG_BYTES, backupCount=5, encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

        # Full app log outside production unless DEBUG asks for it
        if settings.ENV != "production" or settings.DEBUG:
            app_handler = logging.handlers.RotatingFileHandler(
                log_dir / "app.log", maxBytes=MAX_LOG_BYTES, backupCount=3, encoding="utf-8"
            )
            app_handler.setLevel(level)
            app_handler.setFormatter(formatter)
            root_logger.addHandler(app_handler)

    @classmethod
    def setup_logging(cls) -> logging.Logger:
        """Configure handlers from settings and return the root logger."""
        if cls._initialized:
            return cls._root_logger

        level = LOG_LEVELS.get(settings.LOG_LEVEL.upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        formatter = cls._build_formatter()
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if settings.LOG_FILE_ENABLED:
            cls._add_file_handlers(root_logger, formatter, level)

        # httpx logs every request at INFO
        logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

        cls._initialized = True
        cls._root_logger = root_logger
        root_logger.info(f"Logging initialized with level {settings.LOG_LEVEL}")
        return root_logger

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._initialized:
            cls.setup_logging()
        return logging.getLogger(name)


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name`` (usually ``__name__``), set up on first use."""
    return LogManager.get_logger(name)


def init_logging() -> logging.Logger:
    return LogManager.setup_logging()


__all__ = ["LogManager", "get_logger", "init_logging"]
