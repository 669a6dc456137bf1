"""
==========================
Logger Module
==========================

This module provides a logging setup for the application using Python's built-in logging library.
It supports both file and console logging, with rotating log files and a queue for thread-safe logging.
It also includes a listener to process log records from the queue and write them to the appropriate handlers.

Features:
- Uses `QueueHandler` to send log records to a queue.
- Uses `QueueListener` to listen for log records and write them to file and console.
- Configurable log file size and backup count.
- Formats log messages with timestamp, level, thread name, and message.
- A separate file-only logger for the journal HTTP server (Flask + Werkzeug).

Usage:
>>> from memory_journal.logger import logger, configure_logger, shutdown_logger
>>> configure_logger()
>>> logger.info("This is an info message.")
>>> shutdown_logger()  # Important to stop the listener when done.

*Author: Sudharshan TK*\n
*Created: 2025-08-23*
"""

import logging
import logging.handlers
import os
import queue as std_queue
from typing import Optional

from memory_journal.helpers import config as default_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(threadName)s] %(message)s"

# Public logger object other modules import
logger = logging.getLogger("memory_journal")
logger.setLevel(logging.INFO)

# If nothing configures logging, fall back to console so imports can safely log.
if not logger.handlers:
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

# Internal state
_configured = False
_queue: Optional[std_queue.Queue] = None
_listener: Optional[logging.handlers.QueueListener] = None


def configure_server_logger():
    """
    Logger for the journal HTTP server only.
    Writes only to a file, no console output.
    """
    server_logger = logging.getLogger("memory_journal.server")
    server_logger.setLevel(logging.INFO)
    server_logger.propagate = False

    # Avoid adding multiple handlers if called multiple times
    if server_logger.handlers:
        return server_logger

    os.makedirs(default_config.LOG_FOLDER, exist_ok=True)
    log_file = os.path.join(default_config.LOG_FOLDER, "server.log")

    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    server_logger.addHandler(file_handler)

    return server_logger


def configure_logger():
    """
    Configure the logger with file and console handlers.
    Records go through a QueueHandler; a QueueListener owns the rotating file
    handler and the console handler so the tray thread, the server thread and
    the frame clock thread never block on I/O while logging.
    """
    global _configured, _queue, _listener

    if _configured:
        return

    os.makedirs(default_config.LOG_FOLDER, exist_ok=True)
    log_file = os.path.join(default_config.LOG_FOLDER, "journal.log")

    logger.setLevel(logging.INFO)

    # Remove the lightweight default handler added on import so output is not duplicated
    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = logging.Formatter(LOG_FORMAT)

    _queue = std_queue.Queue(-1)
    logger.addHandler(logging.handlers.QueueHandler(_queue))

    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8"
    )
    file_handler.setFormatter(fmt)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(fmt)

    _listener = logging.handlers.QueueListener(
        _queue, file_handler, console_handler)
    _listener.start()

    _configured = True


def shutdown_logger():
    """
    Shutdown the logger by stopping the listener and closing all handlers.
    This function ensures that all log messages are flushed and handlers are closed properly.
    """
    global _listener, _configured

    if _listener:
        try:
            _listener.stop()
        except Exception:
            pass
        _listener = None

    for h in list(logger.handlers):
        try:
            h.flush()
            h.close()
        except Exception:
            pass
        logger.removeHandler(h)

    _configured = False
