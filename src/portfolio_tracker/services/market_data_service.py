"""Market data service for prices and exchange rates."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_tracker.core.timezone import DEFAULT_TZ_NAME, now_in
from portfolio_tracker.domain.models import MarketSnapshot, PriceQuote
from portfolio_tracker.domain.models.market import parse_rate
from portfolio_tracker.providers.market_data_provider import MarketDataProvider

logger = logging.getLogger(__name__)


class MarketDataService:
    """
    Service for fetching prices and rates.

    Wraps a provider with a TTL cache and graceful degradation: when the
    provider fails, the last data it returned is served instead.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        cache_ttl_seconds: int = 60,
        tz_name: str = DEFAULT_TZ_NAME,
    ):
        self._provider = provider
        self._cache_ttl = cache_ttl_seconds
        self._tz_name = tz_name
        self._price_cache: dict[str, PriceQuote] = {}
        self._price_fetched_at: dict[str, datetime] = {}
        self._rate_cache: dict[str, Decimal] = {}
        self._rate_cache_time: Optional[datetime] = None

    def get_prices(self, tickers: list[str]) -> dict[str, PriceQuote]:
        """
        Fetch prices for tickers with caching.

        Returns dict mapping ticker -> PriceQuote. Tickers the provider does not
        know are omitted. Each ticker expires on its own TTL; only expired or
        uncached tickers are requested, and cached data is served when the
        provider fails.
        """
        if not tickers:
            return {}

        tickers = [t.upper() for t in tickers]
        result = {
            t: self._price_cache[t]
            for t in tickers
            if t in self._price_cache and self._is_fresh(self._price_fetched_at.get(t))
        }
        missing = [t for t in tickers if t not in result]
        if not missing:
            return result

        try:
            fetched = self._provider.get_prices(missing)
        except Exception:
            logger.warning("Price provider failed; serving cached prices", exc_info=True)
            result.update({t: self._price_cache[t] for t in missing if t in self._price_cache})
        else:
            fetched_at = now_in(self._tz_name)
            for ticker, quote in fetched.items():
                self._price_cache[ticker] = quote
                self._price_fetched_at[ticker] = fetched_at
            result.update(fetched)

        return {t: result[t] for t in tickers if t in result}

    def get_exchange_rates(self) -> dict[str, Decimal]:
        """Fetch pair-code rates with caching; invalid rates are dropped."""
        if self._rate_cache and self._is_fresh(self._rate_cache_time):
            return dict(self._rate_cache)

        try:
            raw = self._provider.get_exchange_rates()
        except Exception:
            logger.warning("Rate provider failed; serving cached rates", exc_info=True)
            return dict(self._rate_cache)

        rates: dict[str, Decimal] = {}
        for code, value in raw.items():
            rate = parse_rate(value)
            if rate is None:
                logger.warning("Ignoring invalid rate %s=%r", code, value)
                continue
            rates[code.upper()] = rate

        self._rate_cache = rates
        self._rate_cache_time = now_in(self._tz_name)
        return dict(rates)

    def get_snapshot(self, tickers: list[str]) -> MarketSnapshot:
        """
        Prices for tickers plus the current rate table.

        as_of is the latest fetch time among the returned prices and the rate
        table, so repeated snapshots within the TTL compare equal.
        """
        prices = self.get_prices(tickers)
        rates = self.get_exchange_rates()
        fetch_times = [self._price_fetched_at[t] for t in prices if t in self._price_fetched_at]
        if self._rate_cache_time is not None:
            fetch_times.append(self._rate_cache_time)
        return MarketSnapshot(
            prices=prices,
            rates=rates,
            as_of=max(fetch_times) if fetch_times else None,
        )

    def _is_fresh(self, fetched_at: Optional[datetime]) -> bool:
        """Check if cached data is within TTL."""
        if not fetched_at:
            return False
        elapsed = (now_in(self._tz_name) - fetched_at).total_seconds()
        return elapsed < self._cache_ttl
