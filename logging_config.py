# logging_config.py

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Console handler installed by setup_logging, reused on later calls
_console_handler = None


def setup_logging(debug: bool = False):
    global _console_handler

    logger = logging.getLogger()
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    if _console_handler is None:
        # Console handler for real-time logs
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_console_handler)
    _console_handler.setLevel(level)
