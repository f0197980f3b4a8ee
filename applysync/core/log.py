import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # the heartbeat listener already reports connectivity changes
    logging.getLogger("pymongo").setLevel(logging.WARNING)
