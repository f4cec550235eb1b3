"""
Schema bootstrap for deployments that do not run Alembic.
"""
import logging

from app.db.base import Base
from app.db.session import engine
import app.db.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


def init_db(bind=None):
    """Create any missing tables."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")
