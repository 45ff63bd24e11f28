"""Database engine and sessions for the preference_profiles table."""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from tvbingefriend_personalization_service.config import get_database_url
from tvbingefriend_personalization_service.models.base import Base

DATABASE_URL = get_database_url()

if DATABASE_URL is None:
    raise ValueError("DATABASE_URL is not configured. Set the DATABASE_URL environment variable.")

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    pool_recycle=3600,
    echo=False
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables() -> None:
    """Create the preference_profiles table if it does not exist."""
    from tvbingefriend_personalization_service.models.preference_record import PreferenceRecord  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """Yield a session for the configured preference database."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
