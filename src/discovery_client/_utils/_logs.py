import logging
import sys

LOGGER_NAME = "discovery_client"

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Attach a single stream handler to the library logger.

    Safe to call repeatedly; only the level changes on later calls.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if not any(getattr(h, "_discovery_client", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._discovery_client = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
