import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)

Base = declarative_base()


# -----------------------
# SQLAlchemy engine
# -----------------------
def create_catalog_engine(database_path: str, echo: bool = False) -> Engine:
    """
    Build the engine for the relational catalog backend.

    NullPool opens a fresh SQLite connection for every session and closes it
    when the session ends, so no connection outlives a single operation.

    Args:
        database_path: Path of the SQLite database file

    Returns:
        SQLAlchemy Engine bound to the file
    """
    path = Path(database_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    database_url = f"sqlite:///{path}"
    logger.info(f"Connecting to database: {database_url}")

    return create_engine(
        database_url,
        echo=echo,
        poolclass=NullPool,
        connect_args={"check_same_thread": False},
    )


# -----------------------
# Session factory
# -----------------------
def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
