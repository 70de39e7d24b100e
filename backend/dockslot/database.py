from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool, StaticPool

from .config import settings


def _make_engine():
    # SQLite (dev/test): one shared connection so :memory: survives across sessions
    if settings.DB_URL.startswith("sqlite"):
        return create_engine(
            settings.DB_URL,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # Dev against Postgres: no pool, connection closed after every request
    if settings.APP_ENV.lower() != "prod":
        return create_engine(
            settings.DB_URL,
            future=True,
            pool_pre_ping=True,
            poolclass=NullPool,
        )

    return create_engine(
        settings.DB_URL,
        future=True,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
        pool_recycle=1800,
    )

engine = _make_engine()

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    future=True,
)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
