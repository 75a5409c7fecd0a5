"""Loguru setup for scripts and services that drive the flash loan SDK.

The SDK itself only emits through ``loguru.logger`` with ``[RPC]``,
``[RESERVE]`` and ``[FLASH]`` tags and never installs sinks. Applications
call ``setup_logger`` once at startup.
"""

import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)


def _console_level(level: str) -> str:
    # FLASH_LOAN_LOG_LEVEL matches Settings; plain LOG_LEVEL still works for scripts
    return (os.getenv("FLASH_LOAN_LOG_LEVEL") or os.getenv("LOG_LEVEL") or level).upper()


def setup_logger(*, json_logs: bool = False, level: str = "INFO", log_file: str = "") -> None:
    """Replace loguru sinks with a stdout sink and an optional file sink.

    ``json_logs`` switches stdout to loguru's serialized records, which keeps
    signatures and reserve addresses machine-readable. ``log_file`` adds a
    rotating DEBUG sink so decode failures and RPC errors can be replayed
    after a failed transaction.
    """
    console_level = _console_level(level)
    logger.remove()

    if json_logs:
        logger.add(sys.stdout, serialize=True, level=console_level)
    else:
        logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    if log_file:
        logger.add(
            log_file,
            rotation="50 MB",
            retention="3 days",
            compression="gz",
            level="DEBUG",
            serialize=json_logs,
        )
    logger.debug(f"[FLASH] Logging configured: console={console_level} file={log_file or '-'}")
