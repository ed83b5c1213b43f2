# backend/vaultsync/db/init_db.py
import logging

from vaultsync.db.base import Base
from vaultsync.db.session import engine

# Models must be imported so their tables are registered on Base.metadata
from vaultsync import models  # noqa: F401

logger = logging.getLogger(__name__)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready at %s", engine.url.render_as_string(hide_password=True))
