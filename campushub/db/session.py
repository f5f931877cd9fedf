import ssl
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from campushub.core.config import DATABASE_URL
from campushub.core.logging import logger
from campushub.db.models import Base


def _sanitize_database_url(url: str) -> str:
    """Strip query params like sslmode=require and enforce SSL via connect_args."""
    if not url:
        return url
    if "?" in url:
        url = url.split("?", 1)[0]
    return url


def make_engine(url: str) -> Optional[Engine]:
    if not url:
        logger.warning("No DATABASE_URL provided - running in offline mode")
        return None

    url = _sanitize_database_url(url)

    connect_args = {}
    if url.startswith("postgresql") or url.startswith("postgres://"):
        ssl_ctx = ssl.create_default_context()
        connect_args["ssl_context"] = ssl_ctx

    if "sqlite" in url:
        connect_args = {"check_same_thread": False}

    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


def init_db(engine: Optional[Engine]) -> bool:
    """Create tables; False when the database can't be reached (offline mode)."""
    if engine is None:
        return False
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as ex:
        logger.error("Database connection error: %s", ex)
        logger.warning("Running in offline mode - data will not persist")
        return False
    logger.info("Database connected successfully")
    return True


def default_engine() -> Optional[Engine]:
    return make_engine(DATABASE_URL)
