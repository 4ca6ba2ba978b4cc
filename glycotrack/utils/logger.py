import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
DEFAULT_LOG_LEVEL = "INFO"

# Configure logging
logger = logging.getLogger("glycotrack")

if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

logger.setLevel(DEFAULT_LOG_LEVEL)
logger.propagate = False


def configure_logging(level: str) -> None:
    """Apply the configured level to the application logger."""
    logger.setLevel(level.upper())
