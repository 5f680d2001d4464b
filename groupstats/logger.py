import logging

def init_custom_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Module-level console logger for the statistics engine and the CLI.

    Messages are written bare (no level or timestamp) to stderr and do not
    propagate to the root logger. Calling again with the same name returns
    the existing logger without adding a second handler.
    Args:
        name: Logger name, usually the calling module's __name__.
        level: Logging level for both the logger and its console handler.
    Returns:
        The logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Only attach a handler once per logger name
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)
        logger.propagate = False

    return logger


def set_log_level(logger: logging.Logger, level: int) -> None:
    """
    Change the level of a logger created by init_custom_logger, handlers included.
    """
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
