# lms/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from lms.core.config import settings

# Raises ConfigurationError when no DSN can be built; boot must stop there.
DATABASE_URL = settings.database_url

# SQLite needs this to be shared across the threadpool FastAPI runs sync routes in
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {},
    pool_pre_ping="sqlite" not in DATABASE_URL,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
