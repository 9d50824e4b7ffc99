"""Market data provider protocol."""

from decimal import Decimal
from typing import Protocol

from portfolio_tracker.domain.models import PriceQuote


class MarketDataProvider(Protocol):
    """
    Protocol for price and exchange-rate feeds.

    Both calls return read-only snapshots. Missing tickers are omitted from
    get_prices rather than raising.
    """

    def get_prices(self, tickers: list[str]) -> dict[str, PriceQuote]:
        """Fetch the current price and quote currency for each ticker."""
        ...

    def get_exchange_rates(self) -> dict[str, Decimal]:
        """Fetch rates keyed by pair code, e.g. {"USD_ARS": Decimal("1050.50")}."""
        ...
