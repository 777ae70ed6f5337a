"""
Logging Configuration
Sets up the 'newtonfractal' logger and routes Qt's own diagnostics into it,
so warnings like "QThread: Destroyed while thread is still running" end up in
the same stream as ours.
"""
import logging
import sys
from typing import Optional

from PySide6.QtCore import QMessageLogContext, QtMsgType, qInstallMessageHandler

LOGGER_NAME = "newtonfractal"

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def qt_message_handler(mode: QtMsgType, context: QMessageLogContext, message: str) -> None:
    logging.getLogger(f"{LOGGER_NAME}.qt").log(_QT_LEVELS.get(mode, logging.WARNING), message)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    capture_qt: bool = True
) -> logging.Logger:
    """
    Configures the logger for the 'newtonfractal' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        capture_qt: Install a Qt message handler forwarding to 'newtonfractal.qt'.

    Returns:
        The configured namespace logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Calling twice must not duplicate output
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if capture_qt:
        qInstallMessageHandler(qt_message_handler)

    logger.info("Logging initialized.")
    return logger
