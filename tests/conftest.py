"""
Pytest configuration and fixtures for portfolio tracker tests.

This module provides:
- In-memory SQLite database fixtures
- Factory helpers for books and transactions
- Deterministic stub market data providers
- Service and repository fixtures
- A TestClient wired to an isolated app instance
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional

import pytest
import pytz
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from portfolio_tracker.main import create_app
from portfolio_tracker.config.settings import Settings
from portfolio_tracker.repositories.sqlalchemy.database import Base
# Import ORM models to register them with Base before creating tables
from portfolio_tracker.repositories.sqlalchemy import orm_models  # noqa: F401
from portfolio_tracker.repositories.sqlalchemy import (
    SqlAlchemyBookRepository,
    SqlAlchemyTransactionRepository,
)
from portfolio_tracker.services import (
    AnalysisService,
    LedgerService,
    MarketDataService,
    PortfolioEngine,
    ValuationConfig,
)
from portfolio_tracker.domain.models import (
    AssetType,
    Book,
    ExchangeRates,
    PriceQuote,
    Transaction,
    TransactionType,
)

BA_TZ = pytz.timezone("America/Argentina/Buenos_Aires")


# =============================================================================
# TIME HELPERS
# =============================================================================


def ba_datetime(year: int, month: int, day: int, hour: int = 10, minute: int = 0) -> datetime:
    """Create a localized datetime in Buenos Aires time."""
    return BA_TZ.localize(datetime(year, month, day, hour, minute))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return ba_datetime(2024, 6, 15, 14, 30)


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Isolated settings: temp data dir, in-memory database, ARS reporting."""
    return Settings(
        _env_file=None,
        data_dir=tmp_path,
        database_url="sqlite:///:memory:",
        base_currency="ARS",
        report_cache_size=8,
        market_data_cache_ttl_seconds=60,
    )


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def book_repo(test_session) -> SqlAlchemyBookRepository:
    """Provide test BookRepository."""
    return SqlAlchemyBookRepository(test_session)


@pytest.fixture
def transaction_repo(test_session) -> SqlAlchemyTransactionRepository:
    """Provide test TransactionRepository."""
    return SqlAlchemyTransactionRepository(test_session)


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


class DeterministicMarketProvider:
    """
    Deterministic market data provider for testing.

    Provides fixed prices and a single USD_ARS rate, and counts calls.
    """

    FIXED_PRICES = {
        "AAPL": (Decimal("200"), "USD"),
        "MELI": (Decimal("1500"), "ARS"),
        "BMA": (Decimal("900"), "ARS"),
        "FCI-TECH": (Decimal("12"), "ARS"),
    }

    FIXED_RATES = {
        "USD_ARS": Decimal("1000"),
    }

    def __init__(self):
        self.price_calls = 0
        self.rate_calls = 0
        self.requested: list[list[str]] = []

    def get_prices(self, tickers: list[str]) -> dict[str, PriceQuote]:
        """Return deterministic quotes for requested tickers."""
        self.price_calls += 1
        self.requested.append(list(tickers))
        result = {}
        for ticker in tickers:
            key = ticker.upper()
            if key in self.FIXED_PRICES:
                price, currency = self.FIXED_PRICES[key]
                result[key] = PriceQuote(price=price, currency=currency)
        return result

    def get_exchange_rates(self) -> dict[str, Decimal]:
        self.rate_calls += 1
        return dict(self.FIXED_RATES)


class FailingMarketProvider:
    """Market provider that always raises an exception."""

    def get_prices(self, tickers: list[str]) -> dict[str, PriceQuote]:
        raise ConnectionError("Network unavailable")

    def get_exchange_rates(self) -> dict[str, Decimal]:
        raise ConnectionError("Network unavailable")


@pytest.fixture
def market_provider() -> DeterministicMarketProvider:
    """Provide deterministic market data provider."""
    return DeterministicMarketProvider()


@pytest.fixture
def failing_provider() -> FailingMarketProvider:
    """Provide a provider that always fails."""
    return FailingMarketProvider()


@pytest.fixture
def ars_rates() -> ExchangeRates:
    """USD at 1000 ARS."""
    return ExchangeRates("ARS", {"USD": Decimal("1000")})


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def ledger_service(book_repo, transaction_repo) -> LedgerService:
    """Provide LedgerService with test repositories."""
    return LedgerService(
        book_repo=book_repo,
        transaction_repo=transaction_repo,
        base_currency="ARS",
    )


@pytest.fixture
def market_data_service(market_provider) -> MarketDataService:
    """Provide MarketDataService with deterministic provider."""
    return MarketDataService(provider=market_provider, cache_ttl_seconds=60)


@pytest.fixture
def portfolio_engine() -> PortfolioEngine:
    """Provide a PortfolioEngine reporting in ARS."""
    return PortfolioEngine(ValuationConfig(base_currency="ARS"), cache_size=8)


@pytest.fixture
def analysis_service(
    ledger_service, transaction_repo, market_data_service, portfolio_engine
) -> AnalysisService:
    """Provide AnalysisService with all dependencies."""
    return AnalysisService(
        ledger_service=ledger_service,
        transaction_repo=transaction_repo,
        market_data_service=market_data_service,
        portfolio_engine=portfolio_engine,
    )


# =============================================================================
# API TEST CLIENT
# =============================================================================


@pytest.fixture
def client(settings, test_engine, market_provider) -> TestClient:
    """Provide a TestClient for an app bound to the test database."""
    app = create_app(settings=settings, engine=test_engine, provider=market_provider)
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# FACTORY HELPERS
# =============================================================================


@pytest.fixture
def book_factory(book_repo) -> Callable[..., Book]:
    """Factory for creating test books."""
    def _create_book(name: Optional[str] = None) -> Book:
        book = Book(
            book_id=str(uuid.uuid4()),
            name=name or f"Test Book {uuid.uuid4().hex[:8]}",
            created_at=datetime.utcnow(),
        )
        return book_repo.create(book)
    return _create_book


def make_txn(
    txn_type: TransactionType,
    ticker: str,
    quantity,
    price,
    currency: str = "ARS",
    trade_date: date = date(2024, 1, 1),
    fee=Decimal("0"),
    asset_type: str = AssetType.EQUITY.value,
    book_id: str = "book-1",
) -> Transaction:
    """Build an in-memory transaction (not persisted)."""
    return Transaction(
        txn_id=str(uuid.uuid4()),
        book_id=book_id,
        trade_date=trade_date,
        txn_type=txn_type,
        ticker=ticker,
        asset_type=asset_type,
        quantity=Decimal(str(quantity)),
        price=Decimal(str(price)),
        currency=currency,
        fee=Decimal(str(fee)),
    )


def buy(ticker: str, quantity, price, **kwargs) -> Transaction:
    return make_txn(TransactionType.BUY, ticker, quantity, price, **kwargs)


def sell(ticker: str, quantity, price, **kwargs) -> Transaction:
    return make_txn(TransactionType.SELL, ticker, quantity, price, **kwargs)


# =============================================================================
# ASSERTION HELPERS
# =============================================================================


def assert_decimal_equal(actual: Decimal, expected: Decimal, places: int = 6):
    """Assert two decimals are equal to the given number of places."""
    quantum = Decimal(10) ** -places
    assert Decimal(actual).quantize(quantum) == Decimal(expected).quantize(quantum), (
        f"Expected {expected}, got {actual}"
    )
