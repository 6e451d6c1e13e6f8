"""
logging_config.py — Centralized Logging Configuration for the Basket Service

This module configures unified logging behavior for the entire application.
It ensures that all modules log messages consistently to both console and file.

Features:
    • Combined console and file logging output
    • Process ID tagging for multi-process visibility
    • Standardized log format for all modules
    • Reduced verbosity for external dependencies (redis, uvicorn access log)
"""

import logging
import os
import sys

LOG_FILE = os.environ.get("LOG_FILE", "basket_service.log")


def setup_logging(log_file=LOG_FILE):
    """
    Configures the global logging system for the application.

    The configuration includes:
        - Log level: INFO (default)
        - Log format: timestamp, log level, process ID, and message
        - Output destinations:
            1. File: ``LOG_FILE`` env var, default 'basket_service.log'
            2. Console (stdout): real-time logs, Docker/Kubernetes compatible
        - Reduced verbosity for third-party libraries

    Args:
        log_file (str | None): Path of the log file. ``None`` or an empty string
            disables file output.
    """
    log_format = '%(asctime)s - %(levelname)s - [PID:%(process)d] - %(message)s'

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.INFO,
        format=log_format,
        handlers=handlers
    )

    # Reduce verbosity from external libraries
    logging.getLogger("redis").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name):
    """
    Returns a logger instance for a given module or component name.

    Args:
        name (str): The logger name, typically the module’s __name__.

    Returns:
        logging.Logger: A logger that follows the global format and handlers.
    """
    return logging.getLogger(name)
