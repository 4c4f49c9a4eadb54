# -*- coding: utf-8 -*-
"""
Utility functions and constants for k2000.

- Defaults for the command line and the session
- Diagnostic logging configuration
- VISA instrument discovery

See Also
--------
k2000.util.logging : Logging configuration
k2000.util.check_hw : VISA discovery
"""

from .check_hw import list_visa_devices
from .defaults import (
    DEFAULT_FLUSH_EVERY,
    DEFAULT_GNUPLOT,
    DEFAULT_GPIB_ADDRESS,
    DEFAULT_INTERVAL,
    DEFAULT_LOGLEVEL,
    DEFAULT_VISA_TIMEOUT,
    PROGRAM_NAME,
    QUIT_KEYS,
    SINGLE_LINE_ERR_LOG,
    TEST_LOGLEVEL,
)
from .logging import (
    clear_log,
    format_error_response,
    get_log_filename,
    log_default_path,
    shutdown_log,
    start_log,
)

__all__ = [
    "DEFAULT_FLUSH_EVERY",
    "DEFAULT_GNUPLOT",
    "DEFAULT_GPIB_ADDRESS",
    "DEFAULT_INTERVAL",
    "DEFAULT_LOGLEVEL",
    "DEFAULT_VISA_TIMEOUT",
    "PROGRAM_NAME",
    "QUIT_KEYS",
    "SINGLE_LINE_ERR_LOG",
    "TEST_LOGLEVEL",
    "clear_log",
    "format_error_response",
    "get_log_filename",
    "list_visa_devices",
    "log_default_path",
    "shutdown_log",
    "start_log",
]
