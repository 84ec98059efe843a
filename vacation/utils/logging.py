import logging
from pathlib import Path

from vacation.config import get_settings

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)


def configure_logging() -> None:
    """Configure root logger with console and file handlers."""
    settings = get_settings()
    log_dir: Path = settings.logs_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_dir / "service.log", encoding="utf-8"),
        ],
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given name.

    Use __name__ as the logger name in each module:
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


configure_logging()

LOGGER = logging.getLogger("erp_vacation")
