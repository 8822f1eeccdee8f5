import logging
from config import LOG_LEVEL, LOG_FILE

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str = "juwelier") -> logging.Logger:
    """Настраивает общий логгер приложения (один раз)"""
    log = logging.getLogger(name)
    if log.handlers:
        return log

    log.setLevel(LOG_LEVEL)
    formatter = logging.Formatter(FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    log.addHandler(stream_handler)

    if LOG_FILE:
        file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)

    return log


logger = setup_logger()
