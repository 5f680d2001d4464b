# imports
import logging
from groupstats.logger import init_custom_logger, set_log_level

# Console logger
def test_init_custom_logger_single_handler():
    """
    Repeated calls reuse the logger and its one non-propagating handler
    """
    logger = init_custom_logger('groupstats.tests.single')
    again = init_custom_logger('groupstats.tests.single')
    assert again is logger
    assert len(logger.handlers) == 1
    assert logger.propagate is False
    assert logger.handlers[0].formatter._fmt == '%(message)s'

def test_set_log_level_updates_handlers():
    """
    Debug mode lowers both the logger and its handler
    """
    logger = init_custom_logger('groupstats.tests.level')
    set_log_level(logger, logging.DEBUG)
    assert logger.level == logging.DEBUG
    assert all(h.level == logging.DEBUG for h in logger.handlers)
