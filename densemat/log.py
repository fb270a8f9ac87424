# densemat/log.py
import logging
import sys

from densemat.config import LOG_LEVEL

PACKAGE_LOGGER = "densemat"
# Singleton record to track which loggers are already configured
_LOGGER_INITIALIZED = {}
# Handlers installed by get_logger, so reset_logger leaves foreign ones alone
_HANDLERS = []


def get_logger(
    name=PACKAGE_LOGGER,
    level=None,
    console=True,
    fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    propagate=False,
):
    """
    Get a logger below the package logger, configuring the package logger
    on first use.
    - name: Logger name (default 'densemat'); submodules pass __name__
    - level: Logging level (default taken from DENSEMAT_LOG_LEVEL)
    - console: If True, logs go to stderr
    - fmt, datefmt: Formatting for log messages
    - propagate: Whether the package logger propagates to root (default False)
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    if not _LOGGER_INITIALIZED.get(PACKAGE_LOGGER, False):
        root.setLevel(level if level is not None else LOG_LEVEL)
        root.propagate = propagate
        if console:
            ch = logging.StreamHandler(sys.stderr)
            ch.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
            root.addHandler(ch)
            _HANDLERS.append(ch)
        _LOGGER_INITIALIZED[PACKAGE_LOGGER] = True

    return logging.getLogger(name)


def reset_logger():
    """Drop the handlers get_logger installed so the next call reconfigures the package logger."""
    root = logging.getLogger(PACKAGE_LOGGER)
    while _HANDLERS:
        handler = _HANDLERS.pop()
        root.removeHandler(handler)
        handler.close()
    _LOGGER_INITIALIZED.pop(PACKAGE_LOGGER, None)


def installed_handlers():
    """Handlers currently installed on the package logger by get_logger."""
    return list(_HANDLERS)
