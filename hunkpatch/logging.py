import logging
import sys

LOGGER_NAME = "hunkpatch"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """
    Attach a stderr handler to the package logger.

    Calling it again replaces the handler it installed before, so the
    stream always follows the current `sys.stderr`. Propagation is disabled
    so records are not duplicated by a root handler.
    """

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_hunkpatch_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._hunkpatch_handler = True
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger

