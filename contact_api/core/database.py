# contact_api/core/database.py

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()

# Bound to an engine by init_engine() during application startup
SessionLocal = sessionmaker(autocommit=False, autoflush=False)
engine = None


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # in-memory databases live and die with a single connection
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
    }


def init_engine(database_url: str, echo: bool = False):
    """Create the engine and bind the session factory to it."""
    global engine
    engine = create_engine(database_url, echo=echo, **_engine_options(database_url))
    SessionLocal.configure(bind=engine)
    return engine


def check_connection():
    """Open one connection; raises when storage is unreachable."""
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


def create_tables():
    """Create tables that do not exist yet"""
    import contact_api.models  # noqa: F401  (registers models on Base)

    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database tables ready")


def close_engine():
    global engine
    if engine is not None:
        engine.dispose()
        logger.info("Database connections closed")
        engine = None


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
