import logging
from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from config import config

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    # SQLite connections are used from FastAPI's threadpool
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(config.database.url, **_engine_options(config.database.url))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency for database sessions."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for scripts and jobs outside a request; always closed."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        logger.exception("Session aborted, rolling back")
        db.rollback()
        raise
    finally:
        db.close()
