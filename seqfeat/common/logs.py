# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Logging set up, shared by the command line and library use. """

import contextlib
import logging
import os
import sys
from typing import Any, Dict, Generator

LOG_FORMAT = "%(levelname)-8s %(asctime)s   %(message)s"
DATE_FORMAT = "%d/%m %H:%M:%S"


def _yellow_critical(*args: Any) -> None:
    """ Prints critical messages in yellow, without the usual level and time """
    message = f"\033[1;33m{args[0]}\033[0m"
    print(message % args[1:], file=sys.stderr)


@contextlib.contextmanager
def changed_logging(logfile: str = None, verbose: bool = False, debug: bool = False) -> Generator:
    """ Changes logging setup for the duration of the context, e.g.:

        with changed_logging(logfile="features.log", verbose=True):
            logging.info("info")  # appears on the console and in features.log
            logging.debug("debug")  # appears in neither
        logging.info("info")  # appears in neither

        Arguments:
            logfile: None or the path to a file to write logging messages to
            verbose: whether to show INFO level messages and above
            debug: whether to show DEBUG level messages and above

        Returns:
            None
    """
    original_critical = logging.critical
    logger = logging.getLogger()
    original_log_level = logger.level
    handler = None
    original_levels: Dict[logging.Handler, int] = {}
    try:
        logging.critical = _yellow_critical  # type: ignore

        log_level = logging.WARNING
        if debug:
            log_level = logging.DEBUG
        elif verbose:
            log_level = logging.INFO

        logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT)
        logger.setLevel(log_level)

        if logfile:
            # the logfile always gets at least INFO, so the console handlers
            # need to be restricted instead
            if log_level > logging.INFO:
                logger.setLevel(logging.INFO)
                for stream in logger.handlers:
                    original_levels[stream] = stream.level
                    stream.setLevel(log_level)

            dirname = os.path.dirname(logfile)
            if dirname and not os.path.exists(dirname):
                os.makedirs(dirname)
            handler = logging.FileHandler(logfile)
            handler.setLevel(min(log_level, logging.INFO))
            handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
            logger.addHandler(handler)
        yield
    finally:
        logging.critical = original_critical  # type: ignore
        logger.setLevel(original_log_level)
        if handler:
            logger.removeHandler(handler)
            handler.flush()
            handler.close()
            for stream, original_level in original_levels.items():
                stream.setLevel(original_level)
