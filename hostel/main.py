"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Callable

from dotenv import load_dotenv
from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from hostel.api.errors import register_error_handlers
from hostel.api.routes import assignments, complaints, payments, residents, rooms, stats
from hostel.services import create_db_engine, create_session_factory, init_db
from hostel.services.billing_service import today_utc
from hostel.services.config import settings

# Load environment variables (LOG_LEVEL is read straight from the environment)
load_dotenv()

logger = logging.getLogger(__name__)


def create_app(
    session_factory: sessionmaker | None = None,
    clock: Callable[[], date] = today_utc,
) -> FastAPI:
    """
    Build the application.

    Args:
        session_factory: Storage to use; defaults to an engine on settings.database_url
        clock: Reference-date callable passed to billing, payment and assignment services

    Returns:
        Configured FastAPI app
    """
    if session_factory is None:
        engine = create_db_engine(settings.database_url, echo=settings.database_echo)
        session_factory = create_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle (startup and shutdown)."""
        init_db(session_factory.kw["bind"])
        logger.info("Database tables initialized")
        yield
        logger.info("Application shutting down")

    app = FastAPI(
        title=settings.api_title,
        description="Room assignment and rolling 30-day billing for shared housing",
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.session_factory = session_factory
    app.state.clock = clock

    register_error_handlers(app)
    app.include_router(residents.router)
    app.include_router(rooms.router)
    app.include_router(assignments.router)
    app.include_router(payments.router)
    app.include_router(complaints.router)
    app.include_router(stats.router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from hostel.services.logging import setup_server_logging

    setup_server_logging(settings.log_file)
    uvicorn.run(app, host="0.0.0.0", port=8000)
