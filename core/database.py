import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from contextlib import contextmanager

from core.config import BASE_DIR, DATABASE_URL

# Path: project_root/data/intake.db (default SQLite location)
DATA_DIR = os.path.join(BASE_DIR, "data")


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        os.makedirs(DATA_DIR, exist_ok=True)
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


# Create engine
engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))

# Session factory. Objects stay readable after the short-lived session closes.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

# Base class for all models
Base = declarative_base()


@contextmanager
def get_db_context():
    """
    Context manager for database sessions.
    Automatically closes session when done.

    Usage:
        with get_db_context() as db:
            result = db.query(Model).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
