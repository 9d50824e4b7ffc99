"""Dependency injection for FastAPI."""

from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from portfolio_tracker.config.settings import Settings
from portfolio_tracker.repositories.sqlalchemy import (
    SqlAlchemyBookRepository,
    SqlAlchemyTransactionRepository,
    session_scope,
)
from portfolio_tracker.services import (
    AnalysisService,
    LedgerService,
    MarketDataService,
    PortfolioEngine,
)


def get_settings(request: Request) -> Settings:
    """Provide the app's Settings instance."""
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """Provide a database session for the request."""
    yield from session_scope(request.app.state.session_factory)


def get_book_repo(db: Session = Depends(get_db)) -> SqlAlchemyBookRepository:
    """Provide BookRepository instance."""
    return SqlAlchemyBookRepository(db)


def get_transaction_repo(db: Session = Depends(get_db)) -> SqlAlchemyTransactionRepository:
    """Provide TransactionRepository instance."""
    return SqlAlchemyTransactionRepository(db)


def get_market_data_service(request: Request) -> MarketDataService:
    """Provide the shared MarketDataService (its cache spans requests)."""
    return request.app.state.market_data_service


def get_portfolio_engine(request: Request) -> PortfolioEngine:
    """Provide the shared PortfolioEngine (its memo spans requests)."""
    return request.app.state.portfolio_engine


def get_ledger_service(
    settings: Settings = Depends(get_settings),
    book_repo: SqlAlchemyBookRepository = Depends(get_book_repo),
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
) -> LedgerService:
    """Provide LedgerService instance."""
    return LedgerService(
        book_repo=book_repo,
        transaction_repo=transaction_repo,
        base_currency=settings.base_currency,
        oversell_policy=settings.oversell_policy,
        tz_name=settings.timezone,
    )


def get_analysis_service(
    ledger_service: LedgerService = Depends(get_ledger_service),
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
    market_data_service: MarketDataService = Depends(get_market_data_service),
    portfolio_engine: PortfolioEngine = Depends(get_portfolio_engine),
) -> AnalysisService:
    """Provide AnalysisService instance."""
    return AnalysisService(
        ledger_service=ledger_service,
        transaction_repo=transaction_repo,
        market_data_service=market_data_service,
        portfolio_engine=portfolio_engine,
    )
