"""Position consolidator: open holdings, valuation, totals and allocation."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from portfolio_tracker.domain.models import ExchangeRates, PriceQuote, Transaction
from portfolio_tracker.domain.views import AllocationItem, Position, Totals

ZERO = Decimal("0")
HUNDRED = Decimal("100")
DEFAULT_QUANTITY_EPSILON = Decimal("0.0001")


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole as a percentage; 0 when whole is not positive."""
    if whole <= ZERO:
        return ZERO
    return part / whole * HUNDRED


@dataclass
class TickerAggregate:
    """Order-independent sums for one ticker."""

    ticker: str
    asset_type: str
    quantity: Decimal = field(default_factory=lambda: Decimal("0"))
    total_cost_in_base: Decimal = field(default_factory=lambda: Decimal("0"))
    total_buy_quantity: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def all_time_average_cost(self) -> Decimal:
        """Average cost over every unit ever bought; sells never lower it."""
        if self.total_buy_quantity <= ZERO:
            return ZERO
        return self.total_cost_in_base / self.total_buy_quantity


@dataclass(frozen=True)
class Consolidation:
    """Open positions with their totals and asset-type breakdown."""

    positions: tuple[Position, ...]
    totals: Totals
    allocation: tuple[AllocationItem, ...]


class PositionConsolidator:
    """
    Aggregates transactions per ticker into valued open positions.

    Input order does not matter: buys add quantity and cost, sells only remove
    quantity. Tickers at or below the quantity epsilon are treated as closed.
    """

    def __init__(
        self,
        rates: ExchangeRates,
        quantity_epsilon: Decimal = DEFAULT_QUANTITY_EPSILON,
    ):
        self._rates = rates
        self._epsilon = quantity_epsilon

    def aggregate(self, transactions: Iterable[Transaction]) -> dict[str, TickerAggregate]:
        """Per-ticker sums, keyed in first-seen order."""
        aggregates: dict[str, TickerAggregate] = {}
        for txn in transactions:
            agg = aggregates.get(txn.ticker)
            if agg is None:
                agg = aggregates[txn.ticker] = TickerAggregate(
                    ticker=txn.ticker,
                    asset_type=txn.asset_type,
                )
            if txn.is_buy:
                agg.quantity += txn.quantity
                agg.total_cost_in_base += self._rates.to_base(
                    txn.quantity * txn.price + txn.fee, txn.currency
                )
                agg.total_buy_quantity += txn.quantity
            elif txn.is_sell:
                agg.quantity -= txn.quantity
        return aggregates

    def consolidate(
        self,
        transactions: Iterable[Transaction],
        prices: Mapping[str, PriceQuote],
    ) -> Consolidation:
        """Value open positions at current prices and roll them up."""
        positions = tuple(
            self._value(agg, prices.get(agg.ticker))
            for agg in self.aggregate(transactions).values()
            if agg.quantity > self._epsilon
        )
        return Consolidation(
            positions=positions,
            totals=self._totals(positions),
            allocation=self._allocation(positions),
        )

    def _value(self, agg: TickerAggregate, quote: Optional[PriceQuote]) -> Position:
        if quote is None:
            quote = PriceQuote(price=ZERO, currency=self._rates.base_currency)

        avg_cost = agg.all_time_average_cost
        market_value = self._rates.to_base(agg.quantity * quote.price, quote.currency)
        cost_basis = agg.quantity * avg_cost
        gain_loss = market_value - cost_basis

        return Position(
            ticker=agg.ticker,
            asset_type=agg.asset_type,
            quantity=agg.quantity,
            avg_cost_in_base=avg_cost,
            current_price=quote.price,
            current_price_currency=quote.currency,
            market_value_in_base=market_value,
            cost_basis_in_base=cost_basis,
            gain_loss_in_base=gain_loss,
            gain_loss_percent=percent_of(gain_loss, cost_basis),
        )

    @staticmethod
    def _totals(positions: tuple[Position, ...]) -> Totals:
        invested = sum((p.quantity * p.avg_cost_in_base for p in positions), ZERO)
        market_value = sum((p.market_value_in_base for p in positions), ZERO)
        gain_loss = market_value - invested
        return Totals(
            total_invested=invested,
            total_market_value=market_value,
            total_gain_loss=gain_loss,
            total_gain_loss_percent=percent_of(gain_loss, invested),
        )

    @staticmethod
    def _allocation(positions: tuple[Position, ...]) -> tuple[AllocationItem, ...]:
        by_type: dict[str, Decimal] = {}
        for position in positions:
            by_type[position.asset_type] = (
                by_type.get(position.asset_type, ZERO) + position.market_value_in_base
            )

        total = sum(by_type.values(), ZERO)
        return tuple(
            AllocationItem(
                asset_type=asset_type,
                market_value_in_base=value,
                percentage=percent_of(value, total),
            )
            for asset_type, value in by_type.items()
        )
