"""Engine and session factories.

API handlers receive a per-request session from ``get_db`` and commit
explicitly. Celery tasks wrap their work in ``get_db_session``, which
commits when the block succeeds.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import get_settings


def engine_options(url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"pool_pre_ping": True}
    # SQLite (tests, local runs) has no connection pool to size
    if not url.startswith("sqlite"):
        options.update(pool_size=5, max_overflow=10)
    return options


DATABASE_URL = get_settings().DATABASE_URL

engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL))

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=True)


def get_db() -> Iterator[Session]:
    """FastAPI dependency; see ``auth.dependencies.DbSession``."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Iterator[Session]:
    """Session for work outside a request (workers, scripts)."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
