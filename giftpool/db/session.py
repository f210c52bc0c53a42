# giftpool/db/session.py
import logging
from typing import Callable, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from giftpool.core.config import settings
from giftpool.common.errors import ConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SERIALIZABLE_RETRIES = 3


def make_engine(url: str, **kwargs):
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, **kwargs)


engine = make_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _is_serialization_failure(exc: OperationalError) -> bool:
    # Postgres SQLSTATE 40001 / 40P01
    code = getattr(exc.orig, "pgcode", None) or getattr(exc.orig, "sqlstate", None)
    return code in ("40001", "40P01")


def run_serializable(db: Session, work: Callable[[Session], T], retries: int = SERIALIZABLE_RETRIES) -> T:
    """
    Run ``work(db)`` inside its own SERIALIZABLE transaction and commit it.

    Whatever implicit transaction the session already had open (auth lookups and
    the like, read-only) is committed first so the isolation level applies to a
    fresh one. Serialization failures are retried; anything else rolls back and
    propagates.
    """
    for attempt in range(1, retries + 1):
        db.commit()
        db.connection(execution_options={"isolation_level": "SERIALIZABLE"})
        try:
            result = work(db)
            db.commit()
            return result
        except OperationalError as exc:
            db.rollback()
            if not _is_serialization_failure(exc):
                raise
            logger.warning("Serialization failure (attempt %d/%d), retrying", attempt, retries)
        except Exception:
            db.rollback()
            raise
    raise ConflictError("Concurrent update detected, please retry")
