import logging
import os
from logging.handlers import RotatingFileHandler

from utilities import common_constants


def create_rotating_log(name, log_folder=None):
    """
    Logger for an entry point, writing to <log folder>/<name>.log.
    The folder defaults to LOG_FILES_FOLDER and is created when missing.  Calling this
    again for the same file reuses the handler instead of adding another one.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    log_folder = log_folder or common_constants.LOG_FILES_FOLDER
    log_filename = os.path.abspath(os.path.join(log_folder, "{}.log".format(name)))
    for handler in logger.handlers:
        if getattr(handler, "baseFilename", None) == log_filename:
            return logger

    os.makedirs(log_folder, exist_ok=True)
    rh = RotatingFileHandler(
        log_filename,
        maxBytes=common_constants.LOG_MAX_BYTES,
        backupCount=common_constants.LOG_BACKUP_COUNT,
    )
    rh.setFormatter(logging.Formatter(common_constants.LOG_FORMAT))
    logger.addHandler(rh)

    return logger
