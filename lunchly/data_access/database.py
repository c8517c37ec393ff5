import logging
from collections.abc import Generator
from typing import Optional

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from lunchly.core.config import settings

# Table models must be imported so they register on SQLModel.metadata
from lunchly.data_access import models  # noqa: F401


logger = logging.getLogger(__name__)


class Database:
    """Owns the engine (and so the connection pool) for one running app.

    The instance is opened in the application lifespan and disposed on
    shutdown; request handlers never touch it directly, they receive a
    Session through :func:`get_session`.
    """

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None) -> None:
        self.url = url or settings.DATABASE_URL
        self.echo = settings.SQL_ECHO if echo is None else echo
        self._engine: Optional[Engine] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> Engine:
        # Use pool_pre_ping so a dropped server connection is replaced transparently
        if self._engine is None:
            self._engine = create_engine(self.url, echo=self.echo, pool_pre_ping=True)
            logger.info(f"Database engine created for {self._engine.url.render_as_string(hide_password=True)}")
        return self._engine

    def create_db_and_tables(self) -> None:
        """Creates the customers and reservations tables if they don't exist."""
        SQLModel.metadata.create_all(self.engine)
        logger.info("Database tables verified.")

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Database engine disposed.")


def get_session(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency to provide a database session."""
    database: Database = request.app.state.database
    with Session(database.engine) as session:
        yield session
