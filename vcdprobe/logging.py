"""
Logger shared by the VCD reader, the counter detector and the histogram
callback.

Messages go to stderr as '[LEVEL] message': the VCD reader announces each
values scan and the symbol table size (debug), CounterDetector reports the
number of suspects left after every step, and ProgressHistogram reports
each percent of simulated time. Reports and section dumps printed by the
command line use click.echo on stdout and are not affected by the level.

The command line sets the level from --log-level or the log_level key of
the configuration file; library users call set_log_level() directly.
"""

import logging

logger = logging.getLogger('vcdprobe')
logger.setLevel(logging.INFO)

if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    logger.addHandler(handler)

# Above every standard level: nothing is emitted
SILENT = logging.CRITICAL + 1


def set_log_level(level: str | int) -> None:
    """
    Set the level of the vcdprobe logger.

    Args:
        level: A level name ('debug', 'INFO', ...), 'SILENT', or a number

    Raises:
        ValueError: for an unknown level name, so that a typo in
            --log-level or the configuration file is reported
    """
    if isinstance(level, str):
        name = level.upper()
        if name == 'SILENT':
            level = SILENT
        else:
            level = logging.getLevelName(name)
            if not isinstance(level, int):
                raise ValueError(f'Unknown log level: {name}')
    logger.setLevel(level)
