import logging
from typing import Optional

LOGGER_NAME = 'es_datastream'
FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'


def setup_logger(name: str = LOGGER_NAME, log_file: Optional[str] = None, level: int = logging.DEBUG):
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # clear existing handlers so repeated setup does not duplicate output
    if logger.hasHandlers():
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

    formatter = logging.Formatter(FORMAT)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(max(level, logging.INFO))
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)


logger = get_logger()
