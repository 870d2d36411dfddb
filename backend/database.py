import os
import logging
from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from config import DATABASE_URL

logger = logging.getLogger(__name__)

# Only use connect_args if we are using SQLite
engine_args = {}
if DATABASE_URL.startswith("sqlite"):
    engine_args["connect_args"] = {"check_same_thread": False}
else:
    # Production settings for PostgreSQL
    engine_args.update({
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
    })

try:
    engine = create_engine(
        DATABASE_URL,
        **engine_args,
        echo=False,
    )
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
except Exception as e:
    logger.error(f"Failed to create engine: {e}")
    raise e

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what SQLite hands back for DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_db():
    """FastAPI dependency - yields a database session and closes it after use."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create the data/ directory if it doesn't exist, then create all tables."""
    if bind is None and DATABASE_URL.startswith("sqlite:///./"):
        os.makedirs("data", exist_ok=True)

    # Import all models so they register with Base.metadata
    import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database initialized successfully.")
