"""Logging configuration for the survey app and its command line."""
import logging
import os
import sys

FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'

LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}


class ColorFormatter(logging.Formatter):
    """Colours the level name on terminals."""

    def format(self, record):
        color = LEVEL_COLORS.get(record.levelname)
        if color is None:
            return super().format(record)
        plain = record.levelname
        record.levelname = f"{color}{plain}\033[0m"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def setup_logging(level=None, stream=None):
    """Send app logs to stderr.

    Level comes from the argument, else LOG_LEVEL, else INFO. Stdout stays
    free for a document written there. LOG_COLORS=false turns colour off.
    """
    name = (level or os.getenv('LOG_LEVEL') or 'INFO').upper()
    log_level = getattr(logging, name, logging.INFO)
    stream = stream or sys.stderr

    handler = logging.StreamHandler(stream)
    use_colors = os.getenv('LOG_COLORS', 'true').lower() in ('true', '1', 'yes')
    if use_colors and stream.isatty():
        handler.setFormatter(ColorFormatter(FORMAT))
    else:
        handler.setFormatter(logging.Formatter(FORMAT))

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers[:] = [handler]
    logging.getLogger('PIL').setLevel(logging.WARNING)
    return root
