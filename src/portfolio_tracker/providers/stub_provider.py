"""Static market data provider for offline/testing use."""

from decimal import Decimal
from typing import Mapping, Optional

from portfolio_tracker.domain.models import PriceQuote


# Reference price table (ticker -> price, quote currency)
_STUB_PRICES: dict[str, tuple[Decimal, str]] = {
    "AAPL": (Decimal("195"), "USD"),
    "GOOGL": (Decimal("135"), "USD"),
    "MELI": (Decimal("1450"), "ARS"),
    "BMA": (Decimal("850"), "ARS"),
    "FCI-TECH": (Decimal("12"), "ARS"),
    "FCI-AGRO": (Decimal("25"), "ARS"),
    "ROFEX20": (Decimal("52000"), "ARS"),
    "USD": (Decimal("1"), "USD"),
    "ARS": (Decimal("1"), "ARS"),
}

_STUB_RATES: dict[str, Decimal] = {
    "USD_ARS": Decimal("1050.50"),
}


class StubMarketDataProvider:
    """
    Provider backed by fixed tables, for offline operation.

    Unknown tickers are left out of the result so they value at zero downstream.
    """

    def __init__(
        self,
        prices: Optional[Mapping[str, tuple[Decimal, str]]] = None,
        rates: Optional[Mapping[str, Decimal]] = None,
    ):
        self._prices = dict(_STUB_PRICES if prices is None else prices)
        self._rates = dict(_STUB_RATES if rates is None else rates)

    def get_prices(self, tickers: list[str]) -> dict[str, PriceQuote]:
        """Return stub quotes for the requested tickers that are known."""
        result: dict[str, PriceQuote] = {}
        for ticker in tickers:
            key = ticker.upper()
            if key in self._prices:
                price, currency = self._prices[key]
                result[key] = PriceQuote(price=price, currency=currency)
        return result

    def get_exchange_rates(self) -> dict[str, Decimal]:
        return dict(self._rates)
