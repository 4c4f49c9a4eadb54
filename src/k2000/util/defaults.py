# -*- coding: utf-8 -*-

PROGRAM_NAME = "k2000"

DEFAULT_GPIB_ADDRESS = 16
MAX_GPIB_ADDRESS = 30
DEFAULT_INTERVAL = 1.0  # seconds between readings
MAX_INTERVAL = 60.0  # seconds
DEFAULT_FLUSH_EVERY = 100  # samples
DEFAULT_GNUPLOT = "gnuplot"
DEFAULT_VISA_TIMEOUT = 1000  # ms
DEFAULT_LOGLEVEL = "INFO"
TEST_LOGLEVEL = "TRACE"
SINGLE_LINE_ERR_LOG = False  # reformat tracebacks into a single line

QUIT_KEYS = ("q", "\x1b", "\x03")  # q, ESC, Ctrl-C (signals are off while polling)
