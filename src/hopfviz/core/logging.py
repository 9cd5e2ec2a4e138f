"""
Unified logging utilities for the hopfviz package.

Exports:
    - logger: Global Loguru logger (ready for use/import).
    - set_console_level: Replace the stderr sink with one at a given level.
    - setup_logfile: Add file logging with rotation/compression.
    - setup_json_logfile: Add a JSON-format log file for machine parsing.
"""

import sys

from loguru import logger

__all__ = [
    "logger",
    "set_console_level",
    "setup_logfile",
    "setup_json_logfile",
]

_console_sink_id = None


def _stderr_sink(message) -> None:
    # Resolve sys.stderr per message so redirected streams (CLI runners) are honored.
    sys.stderr.write(message)


def set_console_level(level: str = "INFO") -> int:
    """
    Route console logging to stderr at `level`, dropping the previous console sink.

    Args:
        level (str): Logging level (DEBUG, INFO, etc.).

    Returns:
        int: Loguru handler id of the new console sink.
    """
    global _console_sink_id
    if _console_sink_id is None:
        # Loguru ships with handler 0 on stderr; take ownership of it.
        try:
            logger.remove(0)
        except ValueError:
            pass
    else:
        logger.remove(_console_sink_id)
    _console_sink_id = logger.add(_stderr_sink, level=level.upper())
    return _console_sink_id


def setup_logfile(
    log_path: str,
    rotation: str = "10 MB",
    retention: str = "10 days",
    compression: str = "zip",
    level: str = "INFO",
    colorize: bool = False
):
    """
    Add a rotating file handler to the global logger.

    Args:
        log_path (str): Path to the log file.
        rotation (str): Size or time string for log rotation.
        retention (str): How long to keep old logs.
        compression (str): Compression method for rotated logs.
        level (str): Logging level (DEBUG, INFO, etc.).
        colorize (bool): Colorize file output (default: False).
    """
    handler_id = logger.add(
        log_path,
        rotation=rotation,
        retention=retention,
        compression=compression,
        level=level.upper(),
        colorize=colorize,
        backtrace=True,
        diagnose=True,
    )
    logger.info(f"Loguru file logging initialized: {log_path}")
    return handler_id


def setup_json_logfile(log_path: str, **kwargs):
    """
    Add a JSON-format log file (for machine parsing).
    Args:
        log_path (str): Path to JSON log file.
        **kwargs: Passed to logger.add().
    """
    handler_id = logger.add(
        log_path,
        serialize=True,
        **kwargs
    )
    logger.info(f"Loguru JSON logging initialized: {log_path}")
    return handler_id
