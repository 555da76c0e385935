"""Synchronous get/set-by-key store backed by SQLAlchemy."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from database import SessionLocal
from errors import PersistenceError
from models import KeyValueDB

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Text values addressed by string keys.

    Every call opens its own database session so the store can be shared
    across requests.
    """

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    def get(self, key: str) -> str | None:
        db = self.session_factory()
        try:
            row = db.get(KeyValueDB, key)
            return row.value if row is not None else None
        finally:
            db.close()

    def set(self, key: str, value: str) -> None:
        db = self.session_factory()
        try:
            row = db.get(KeyValueDB, key)
            if row is None:
                db.add(KeyValueDB(key=key, value=value))
            else:
                row.value = value
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to write key %s: %s", key, e)
            raise PersistenceError(f"Failed to write {key}: {e}") from e
        finally:
            db.close()
