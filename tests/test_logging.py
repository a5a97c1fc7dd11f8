from snow_cat.config import LoggingConfig
from snow_cat.logging import get_logger, setup_logging


def test_setup_is_applied_once_and_loggers_log():
    setup_logging(LoggingConfig(level="DEBUG", json=False))
    setup_logging(LoggingConfig(level="DEBUG", json=True))

    logger = get_logger("snow_cat.tests")

    logger.info("mood.test_event", offset=0)
