import logging

from staybook.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # pymongo is chatty at INFO about topology/heartbeats
    logging.getLogger("pymongo").setLevel(logging.WARNING)
