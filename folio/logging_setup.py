from __future__ import annotations

import sys

from loguru import logger

from .settings import get_config_dir


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Configure loguru: colored stderr plus a rotating daily log file."""
    log_level = "DEBUG" if verbose else level
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format="<level>{level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>",
        colorize=True,
    )

    log_dir = get_config_dir() / "logs"
    log_file = str(log_dir / "folio_{time:YYYY-MM-DD}.log")
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="1 day",
            retention="7 days",
            compression="zip",
            encoding="utf-8",
        )
    except OSError as exc:
        logger.error(f"Could not configure file logging to {log_file}: {exc}")
        logger.warning("File logging disabled.")
        return
    logger.info(f"Logging initialized. Level: {log_level}. Log file: {log_file}")
