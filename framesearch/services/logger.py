"""Centralized logging service using loguru."""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from loguru import logger

from framesearch.config import settings

LOG_DIR = Path(settings.log_dir)
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Remove default handler
logger.remove()

logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level=settings.app_log_level.upper(),
    colorize=True,
)

logger.add(
    LOG_DIR / "framesearch_{time:YYYY-MM-DD}.log",
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    level="DEBUG",
    rotation="00:00",  # New file at midnight
    retention="7 days",
    compression="zip",
)

# Reduce noise from framework/network libraries
for logger_name in (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "fastapi",
    "httpx",
    "httpcore",
    "asyncio",
):
    logging.getLogger(logger_name).setLevel(settings.noisy_log_level.upper())


def log_upstream_call(
    page: int,
    start: int,
    status_code: int | None,
    items: int = 0,
    duration_ms: int = 0,
    error: Optional[str] = None,
) -> None:
    """Log one upstream search page request."""
    call_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "page": page,
        "start": start,
        "status_code": status_code,
        "items": items,
        "duration_ms": duration_ms,
        "error": error,
    }
    if error:
        logger.warning(f"UPSTREAM_CALL_FAILED: {call_data}")
    else:
        logger.info(f"UPSTREAM_CALL: {call_data}")


def log_probe(
    url: str,
    verdict: str,
    duration_ms: int = 0,
    detail: Optional[str] = None,
) -> None:
    """Log the verdict of a single frame probe."""
    probe_data = {
        "url": url,
        "verdict": verdict,
        "duration_ms": duration_ms,
        "detail": detail,
    }
    if verdict == "displayable":
        logger.debug(f"PROBE: {probe_data}")
    else:
        logger.info(f"PROBE_REJECTED: {probe_data}")


def log_event(
    event_type: str,
    message: str,
    **kwargs,
) -> None:
    """Log a generic event."""
    event_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": event_type,
        "message": message,
        **kwargs,
    }
    logger.info(f"EVENT: {event_data}")
