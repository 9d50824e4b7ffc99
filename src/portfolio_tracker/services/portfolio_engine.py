"""Portfolio engine: merges the ledger and consolidator passes into one report."""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

from portfolio_tracker.core.exceptions import ValidationError
from portfolio_tracker.domain.models import (
    ExchangeRates,
    OversellPolicy,
    PriceQuote,
    Transaction,
)
from portfolio_tracker.domain.views import PortfolioReport
from portfolio_tracker.services.cost_basis_ledger import CostBasisLedger
from portfolio_tracker.services.position_consolidator import (
    DEFAULT_QUANTITY_EPSILON,
    PositionConsolidator,
)

logger = logging.getLogger(__name__)

RatesInput = Union[ExchangeRates, Mapping[str, Any]]


@dataclass(frozen=True)
class ValuationConfig:
    """Per-evaluation knobs, owned by the caller."""

    base_currency: str = "ARS"
    oversell_policy: OversellPolicy = OversellPolicy.SKIP
    quantity_epsilon: Decimal = field(default_factory=lambda: DEFAULT_QUANTITY_EPSILON)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_currency", self.base_currency.upper())
        object.__setattr__(self, "oversell_policy", OversellPolicy(self.oversell_policy))


def coerce_rates(rates: Optional[RatesInput], base_currency: str) -> ExchangeRates:
    """Accept a ready ExchangeRates or a mapping of currency/pair codes."""
    if isinstance(rates, ExchangeRates):
        if rates.base_currency != base_currency.upper():
            raise ValidationError(
                f"Rate table is in {rates.base_currency}, "
                f"reporting currency is {base_currency.upper()}"
            )
        return rates
    return ExchangeRates.from_pair_codes(rates or {}, base_currency=base_currency)


def evaluate_portfolio(
    transactions: Iterable[Transaction],
    prices: Mapping[str, PriceQuote],
    rates: Optional[RatesInput],
    config: Optional[ValuationConfig] = None,
    as_of: Optional[datetime] = None,
) -> PortfolioReport:
    """
    Derive holdings, totals, allocation and realized-trade statistics.

    Pure function of its inputs. The realized-gains replay and the position
    consolidation each make their own pass over the same transactions.
    """
    config = config or ValuationConfig()
    transactions = list(transactions)
    table = coerce_rates(rates, config.base_currency)

    realized = CostBasisLedger(table, config.oversell_policy).replay(transactions)
    consolidation = PositionConsolidator(table, config.quantity_epsilon).consolidate(
        transactions, prices
    )

    missing_prices = [p.ticker for p in consolidation.positions if p.ticker not in prices]
    currencies = {txn.currency for txn in transactions}
    currencies.update(
        prices[p.ticker].currency for p in consolidation.positions if p.ticker in prices
    )
    missing_rates = sorted(c for c in currencies if not table.has_rate(c))

    if missing_prices:
        logger.warning("No price for %s; valued at zero", ", ".join(missing_prices))
    if missing_rates:
        logger.warning(
            "No %s rate for %s; converted at zero",
            config.base_currency, ", ".join(missing_rates),
        )

    return PortfolioReport(
        base_currency=config.base_currency,
        positions=consolidation.positions,
        totals=consolidation.totals,
        allocation=consolidation.allocation,
        realized_gains=realized,
        missing_prices=missing_prices,
        missing_rates=missing_rates,
        as_of=as_of,
    )


class PortfolioEngine:
    """
    Evaluates portfolios with a small memo of recent reports.

    The memo is keyed on the full value of the inputs (transactions, prices,
    rates, as_of), so any change to them recomputes. A cache_size of 0 turns
    memoization off; results are identical either way.
    """

    def __init__(self, config: Optional[ValuationConfig] = None, cache_size: int = 32):
        self._config = config or ValuationConfig()
        self._cache_size = max(cache_size, 0)
        self._cache: OrderedDict[tuple, PortfolioReport] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def config(self) -> ValuationConfig:
        return self._config

    @property
    def base_currency(self) -> str:
        return self._config.base_currency

    def evaluate(
        self,
        transactions: Iterable[Transaction],
        prices: Mapping[str, PriceQuote],
        rates: Optional[RatesInput],
        as_of: Optional[datetime] = None,
    ) -> PortfolioReport:
        """Return the report for these inputs, reusing a memoized one if present."""
        transactions = tuple(transactions)
        table = coerce_rates(rates, self._config.base_currency)

        if self._cache_size == 0:
            return evaluate_portfolio(transactions, prices, table, self._config, as_of)

        key = (transactions, tuple(sorted(prices.items())), table.cache_key(), as_of)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                self.hits += 1
                return cached

        report = evaluate_portfolio(transactions, prices, table, self._config, as_of)

        with self._lock:
            self.misses += 1
            self._cache[key] = report
            while len(self._cache) > self._cache_size:
                self._cache.popitem(last=False)
        return report

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
