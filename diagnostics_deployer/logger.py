"""
Console logging for the diagnostics deployer.

All modules log through logging.getLogger(__name__); records from
diagnostics_deployer.* propagate to the single colored stdout handler
installed on the package logger here.

Debug mode lowers the level to DEBUG and prefixes each line with the
emitting module, so provider and pipeline output can be told apart.
"""

import logging
import sys
import traceback

from colorlog import ColoredFormatter

LOGGER_NAME = "diagnostics_deployer"

LOG_FORMAT = "%(log_color)s[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "%(log_color)s[%(levelname)s] %(name)s: %(message)s"

LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

_debug_mode = False

_console = logging.StreamHandler(sys.stdout)


def setup_logger(debug_mode=False):
    """Configure the colored console handler and return the package logger."""
    level = logging.DEBUG if debug_mode else logging.INFO
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)

    _console.setLevel(level)
    _console.setFormatter(ColoredFormatter(
        DEBUG_LOG_FORMAT if debug_mode else LOG_FORMAT,
        log_colors=LEVEL_COLORS
    ))
    if not package_logger.handlers:
        package_logger.addHandler(_console)
    return package_logger


def configure_logger(mode=""):
    """Switch logging for the run mode; "DEBUG" (any case) enables debug output."""
    global _debug_mode
    _debug_mode = (mode or "").upper() == "DEBUG"
    setup_logger(debug_mode=_debug_mode)
    if _debug_mode:
        logger.debug("Debug mode is active.")
    return logger


def get_debug_mode():
    return _debug_mode


def print_stack_trace():
    """Log the traceback of the exception being handled, in debug mode only."""
    if _debug_mode:
        logger.error(traceback.format_exc())


# INFO until configure_logger() runs
logger = setup_logger()
