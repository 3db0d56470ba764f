# lms/db/init_db.py
import logging

from lms.db.base import Base
from lms.db.session import engine
from lms import models  # noqa: F401

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Create missing tables. Failures propagate so startup aborts."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready (%d tables)", len(Base.metadata.tables))
