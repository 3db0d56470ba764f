# lms/core/logging_config.py
import logging

from lms.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(
        format=LOG_FORMAT,
        level=(level or settings.LOG_LEVEL).upper(),
    )
    # passlib logs a noisy warning when probing newer bcrypt builds
    logging.getLogger("passlib").setLevel(logging.ERROR)
