"""
Logging configuration
"""
import logging
import sys
from pathlib import Path

from loguru import logger
from retention.core.config import settings


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging and redirect to loguru
    """

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(level: str = None, log_dir: Path = Path("logs")):
    """
    Route engine logging through loguru.

    Engine modules log with ``logging.getLogger(__name__)``; calling this once
    at process start sends those records to a loguru stdout sink (and a
    rotating file sink in production).
    """
    level = level or settings.LOG_LEVEL

    # Remove default logger
    logger.remove()

    logger.add(
        sys.stdout,
        enqueue=True,
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
    )

    if settings.ENVIRONMENT == "production":
        log_dir.mkdir(exist_ok=True)

        logger.add(
            log_dir / "retention_{time:YYYY-MM-DD}.log",
            rotation="500 MB",
            retention="30 days",
            enqueue=True,
            serialize=False,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )

    # Intercept everything at the root logger
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(level)

    # Engine loggers propagate to the root logger
    for name in list(logging.root.manager.loggerDict.keys()):
        if name.startswith("retention"):
            logging.getLogger(name).handlers = []
            logging.getLogger(name).propagate = True

    logger.info(f"Logging configured - Level: {level}, Environment: {settings.ENVIRONMENT}")
