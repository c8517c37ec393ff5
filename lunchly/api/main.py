import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from lunchly.api.routes import router
from lunchly.core.config import settings
from lunchly.data_access.database import Database


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handles system startup and shutdown events.

    Initializes logging, opens the database engine (creating the customers
    and reservations tables if they don't exist) and disposes of the
    connection pool when the server stops.
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler()] # This sends it to the Terminal
    )

    database = Database()
    database.open()
    database.create_db_and_tables()
    app.state.database = database

    yield

    database.dispose()

app = FastAPI(
    title=settings.APP_TITLE,
    description="Customers and table reservations for the restaurant",
    version="0.1.0",
    lifespan=lifespan
)

app.include_router(router)
