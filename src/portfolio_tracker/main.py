"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import Engine

from portfolio_tracker.config.settings import Settings
from portfolio_tracker.config.logging_config import setup_logging
from portfolio_tracker.repositories.sqlalchemy import (
    create_db_engine,
    create_session_factory,
    init_db,
)
from portfolio_tracker.api.routers import books_router, transactions_router, portfolio_router
from portfolio_tracker.core.exceptions import AppError, NotFoundError
from portfolio_tracker.providers import MarketDataProvider, StubMarketDataProvider
from portfolio_tracker.services import MarketDataService, PortfolioEngine


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    provider: Optional[MarketDataProvider] = None,
) -> FastAPI:
    """
    Build the API application.

    The app owns its settings, database engine, market data cache and report
    memo; they live on app.state for the request dependencies.
    """
    settings = settings or Settings()
    owns_engine = engine is None
    engine = engine or create_db_engine(settings.get_database_url())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings)
        init_db(engine)
        yield
        if owns_engine:
            engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-currency investment tracking and portfolio valuation",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.session_factory = create_session_factory(engine)
    app.state.market_data_service = MarketDataService(
        provider=provider or StubMarketDataProvider(),
        cache_ttl_seconds=settings.market_data_cache_ttl_seconds,
        tz_name=settings.timezone,
    )
    app.state.portfolio_engine = PortfolioEngine(
        config=settings.valuation_config(),
        cache_size=settings.report_cache_size,
    )

    app.include_router(books_router)
    app.include_router(transactions_router)
    app.include_router(portfolio_router)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Global handler for application errors."""
        status_code = 404 if isinstance(exc, NotFoundError) else 400
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.code, "message": exc.message},
        )

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/")
    def root() -> dict[str, str]:
        """Root endpoint with API info."""
        return {
            "app": settings.app_name,
            "version": settings.app_version,
            "base_currency": settings.base_currency,
            "docs": "/docs",
        }

    return app
