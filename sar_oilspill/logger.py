"""
Logging helpers shared by every module of the pipeline.
"""

import logging
import os

from sar_oilspill.cste import GeneralConfig, GeneralPath

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Return a configured logger.

    Handlers are attached only once per logger name, so calling this at
    module import time in every module is safe.

    Args:
        name: Logger name (usually the module name)
        level: Logging level for the logger

    Returns:
        Logger with a console handler and, if GeneralConfig.LOG_TO_FILE is
        set, a file handler writing to GeneralPath.LOG_PATH/<name>.log
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if GeneralConfig.LOG_TO_FILE:
        os.makedirs(GeneralPath.LOG_PATH, exist_ok=True)
        file_name = name if name.endswith(".log") else f"{name}.log"
        file_handler = logging.FileHandler(os.path.join(GeneralPath.LOG_PATH, file_name))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
