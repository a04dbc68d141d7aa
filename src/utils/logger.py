import logging
import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)

# stdlib loggers of the HTTP / Telegram stack log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "aiogram", "aiohttp")


def setup_logger(*, json_logs: bool = False, level: str = "INFO") -> None:
    """Configure loguru sinks for the radar.

    Console level follows LOG_LEVEL (default INFO). A daily file keeps
    DEBUG for post-mortem analysis, and logs/error.log collects only
    ERROR and above (failed sends, cycle errors).
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stdout, serialize=True, level=console_level)
    else:
        logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    _add_file_sink(
        "logs/radar_{time:YYYY-MM-DD}.log",
        level="DEBUG",
        json_logs=json_logs,
        rotation="50 MB",
        retention="3 days",
        compression="gz",
    )
    _add_file_sink(
        "logs/error.log",
        level="ERROR",
        json_logs=json_logs,
        rotation="5 MB",
        retention=5,
        backtrace=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _add_file_sink(path: str, *, level: str, json_logs: bool, **options) -> None:
    logger.add(path, level=level, serialize=json_logs, enqueue=True, **options)
