"""
FastAPI application factory.

create_app() builds and configures one application instance:
  1. Settings, database and advice client: created here (or passed in by
     the caller) and stored on app.state for the dependencies to hand out
  2. Lifespan manager: creates tables on startup, closes the connection
     pool and the advice client on shutdown
  3. CORS middleware: allows frontend origins to make cross-origin requests
  4. Exception handlers: map domain errors to HTTP responses
  5. Router registration: mounts every API endpoint group under /api

Running locally:
    uvicorn app.main:create_app --factory --reload

The --reload flag watches for file changes and restarts automatically,
which is ideal for development but should not be used in production.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import models  # noqa: F401  (registers every table on Base.metadata)
from app.advice_client import AdviceClient, OpenAIChatClient
from app.config import Settings
from app.database import Database
from app.exceptions import register_exception_handlers
from app.routers import accounts, advice, auth, goals, journal, transactions, transfers

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    advice_client: AdviceClient | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; read from the environment / .env if omitted.
        database: Connection pool and session factory; built from
                  settings.DATABASE_URL if omitted.
        advice_client: Language-model client; an OpenAIChatClient built
                       from settings if omitted.
    """
    settings = settings or Settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    database = database or Database(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        isolation_level=settings.DATABASE_ISOLATION_LEVEL,
    )
    advice_client = advice_client or OpenAIChatClient.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup:
          Creates all database tables if they don't exist. Production
          deployments should manage the schema with migrations instead.

        Shutdown:
          Disposes of the database engine and closes the advice client.
        """
        await database.create_all()
        logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
        yield
        await advice_client.aclose()
        await database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Personal finance API: accounts, transfers, savings goals, mood journal and AI advice",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.advice_client = advice_client

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------

    # CORS: lock this down to the real frontend domain(s) in production.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------

    app.include_router(auth.router, prefix="/api", tags=["Auth"])
    app.include_router(accounts.router, prefix="/api/accounts", tags=["Accounts"])
    app.include_router(transactions.router, prefix="/api", tags=["Transactions"])
    app.include_router(transfers.router, prefix="/api/transfer", tags=["Transfers"])
    app.include_router(goals.router, prefix="/api/goals", tags=["Goals"])
    app.include_router(journal.router, prefix="/api/journal", tags=["Journal"])
    app.include_router(advice.router, prefix="/api/ai/advice", tags=["AI Advice"])

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for deployment health checks."""
        return {"status": "ok", "version": settings.APP_VERSION}

    return app
