"""Analysis service: portfolio reports for a book."""

from portfolio_tracker.domain.views import PortfolioReport
from portfolio_tracker.repositories.protocols import TransactionRepository
from portfolio_tracker.services.ledger_service import LedgerService
from portfolio_tracker.services.market_data_service import MarketDataService
from portfolio_tracker.services.portfolio_engine import PortfolioEngine


class AnalysisService:
    """
    Service for portfolio valuation and reporting.

    Loads a book's transactions, takes a market snapshot for the tickers they
    reference and hands both to the portfolio engine. Nothing is stored: every
    call recomputes from the ledger (the engine may memoize identical inputs).
    """

    def __init__(
        self,
        ledger_service: LedgerService,
        transaction_repo: TransactionRepository,
        market_data_service: MarketDataService,
        portfolio_engine: PortfolioEngine,
    ):
        self._ledger = ledger_service
        self._transaction_repo = transaction_repo
        self._market = market_data_service
        self._engine = portfolio_engine

    def portfolio_report(self, book_id: str) -> PortfolioReport:
        """Positions, totals, allocation and realized gains for a book."""
        self._ledger.get_book(book_id)
        transactions = self._transaction_repo.list_by_book(book_id)
        if not transactions:
            return PortfolioReport(base_currency=self._engine.base_currency)

        tickers = list(dict.fromkeys(t.ticker for t in transactions))
        snapshot = self._market.get_snapshot(tickers)
        return self._engine.evaluate(
            transactions,
            snapshot.prices,
            snapshot.rates,
            as_of=snapshot.as_of,
        )
