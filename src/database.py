"""Database configuration and session management."""

import os

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Get database URL from environment
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./gym_buddy.db")

# SQLite connections are shared with the request threadpool
connect_args = (
    {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
)

# Create SQLAlchemy engine
engine = create_engine(
    DATABASE_URL,
    echo=os.environ.get("SQL_ECHO", "").lower() in ("1", "true", "yes"),
    connect_args=connect_args,
)

# Create SessionLocal class for database sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for declarative models
Base = declarative_base()


def init_db(bind=engine):
    """Create any missing tables on the given engine."""
    # Imported for its side effect of registering tables on Base
    import models  # noqa: F401

    Base.metadata.create_all(bind=bind)
