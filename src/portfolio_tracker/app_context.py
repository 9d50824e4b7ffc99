"""Application context for in-process service management.

Provides the same services as the HTTP API without going through FastAPI,
for scripts and other embedding callers.
"""

from typing import Optional

from sqlalchemy.orm import Session

from portfolio_tracker.config.settings import Settings
from portfolio_tracker.repositories.sqlalchemy import (
    create_db_engine,
    create_session_factory,
    init_db,
    SqlAlchemyBookRepository,
    SqlAlchemyTransactionRepository,
)
from portfolio_tracker.providers import MarketDataProvider, StubMarketDataProvider
from portfolio_tracker.services import (
    AnalysisService,
    LedgerService,
    MarketDataService,
    PortfolioEngine,
)


class AppContext:
    """
    Owns one Settings instance, one database session and the services built on it.

    Services are created lazily and reset when the session is refreshed.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider: Optional[MarketDataProvider] = None,
    ):
        self._settings = settings or Settings()
        self._engine = create_db_engine(self._settings.get_database_url())
        init_db(self._engine)
        self._session_factory = create_session_factory(self._engine)
        self._session: Optional[Session] = None
        self._provider = provider or StubMarketDataProvider()

        # Service instances (lazy initialized)
        self._ledger_service: Optional[LedgerService] = None
        self._market_data_service: Optional[MarketDataService] = None
        self._portfolio_engine: Optional[PortfolioEngine] = None
        self._analysis_service: Optional[AnalysisService] = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def _get_session(self) -> Session:
        """Get or create database session."""
        if self._session is None:
            self._session = self._session_factory()
        return self._session

    def refresh_session(self) -> None:
        """Refresh the database session (call after external changes)."""
        if self._session:
            self._session.close()
        self._session = self._session_factory()
        # Reset services bound to the old session
        self._ledger_service = None
        self._analysis_service = None

    @property
    def ledger(self) -> LedgerService:
        """Get the LedgerService instance."""
        if self._ledger_service is None:
            self._ledger_service = LedgerService(
                book_repo=SqlAlchemyBookRepository(self._get_session()),
                transaction_repo=SqlAlchemyTransactionRepository(self._get_session()),
                base_currency=self._settings.base_currency,
                oversell_policy=self._settings.oversell_policy,
                tz_name=self._settings.timezone,
            )
        return self._ledger_service

    @property
    def market_data(self) -> MarketDataService:
        """Get the MarketDataService instance."""
        if self._market_data_service is None:
            self._market_data_service = MarketDataService(
                provider=self._provider,
                cache_ttl_seconds=self._settings.market_data_cache_ttl_seconds,
                tz_name=self._settings.timezone,
            )
        return self._market_data_service

    @property
    def engine(self) -> PortfolioEngine:
        """Get the PortfolioEngine instance."""
        if self._portfolio_engine is None:
            self._portfolio_engine = PortfolioEngine(
                config=self._settings.valuation_config(),
                cache_size=self._settings.report_cache_size,
            )
        return self._portfolio_engine

    @property
    def analysis(self) -> AnalysisService:
        """Get the AnalysisService instance."""
        if self._analysis_service is None:
            self._analysis_service = AnalysisService(
                ledger_service=self.ledger,
                transaction_repo=SqlAlchemyTransactionRepository(self._get_session()),
                market_data_service=self.market_data,
                portfolio_engine=self.engine,
            )
        return self._analysis_service

    def close(self) -> None:
        """Clean up resources."""
        if self._session:
            self._session.close()
            self._session = None
        self._engine.dispose()
