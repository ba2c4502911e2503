import logging
import sys

from storefront.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - [%(levelname)-7s] - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Attach a stdout handler to the ``storefront`` logger once."""
    log = logging.getLogger("storefront")
    log.setLevel((level or settings.LOG_LEVEL).upper())
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
