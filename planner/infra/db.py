from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from planner.config import SETTINGS

engine = create_engine(SETTINGS.database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def init_db() -> None:
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


def create_schema() -> None:
    """Create missing tables directly; production databases use the migrations."""
    from . import models  # noqa: F401  registers the tables on Base

    Base.metadata.create_all(engine)


def drop_schema() -> None:
    Base.metadata.drop_all(engine)
