"""SQLAlchemy database models."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, Integer, LargeBinary, String, Text

from database import Base


def utcnow() -> datetime:
    return datetime.now(UTC)


class KeyValueDB(Base):
    """Database model for the local key-value store.

    Each row holds one serialized collection (routines or logs) as text.
    """

    __tablename__ = "kv_store"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<KeyValueDB(key={self.key}, size={len(self.value or '')})>"


class AssetCacheDB(Base):
    """Database model for cached app assets.

    Rows are grouped by cache name so caches from older app versions can be
    found and dropped.
    """

    __tablename__ = "asset_cache"

    cache_name = Column(String, primary_key=True)
    path = Column(String, primary_key=True)
    status_code = Column(Integer, nullable=False)
    content = Column(LargeBinary, nullable=False)
    headers = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<AssetCacheDB(cache_name={self.cache_name}, path={self.path})>"
