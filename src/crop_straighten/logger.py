"""loguru sinks for the crop editor.

Library modules only ``from loguru import logger``; the application entry
point calls :func:`configure_logging` once to install the sinks.
"""

from pathlib import Path
import sys
from typing import Optional

from loguru import logger

_CONFIGURED = False


def get_log_file_path(base: Optional[Path] = None) -> Path:
    """Return the log file path, creating its directory if needed."""
    log_dir = (base or Path.home() / ".crop_straighten") / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "crop_straighten.log"


def configure_logging(
    console_level: str = "INFO", log_dir: Optional[Path] = None
) -> None:
    """Install a colored stderr sink and a rotating DEBUG file sink."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger.remove()
    # windowed builds have no stderr
    if sys.stderr is not None:
        logger.add(
            sys.stderr,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
            level=console_level,
            colorize=True,
        )
    try:
        logger.add(
            get_log_file_path(log_dir),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
            level="DEBUG",
            rotation="1 day",
            retention="7 days",
            compression="zip",
            encoding="utf-8",
        )
    except OSError as exc:
        logger.warning("File logging disabled: {}", exc)
    _CONFIGURED = True


__all__ = ["configure_logging", "get_log_file_path"]
