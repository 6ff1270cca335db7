import logging

from app.core.db import Base, engine
# Ensure models are imported so SQLAlchemy knows about them
from app import models  # noqa: F401

logger = logging.getLogger("nexus.bootstrap")


def create_all(bind=None) -> None:
    """Create all tables if they don't exist yet."""
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    logger.info("Schema ensured on %s", bind.url.render_as_string(hide_password=True))
