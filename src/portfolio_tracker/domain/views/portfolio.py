"""View models for portfolio valuation outputs."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

ZERO = Decimal("0")


@dataclass(frozen=True)
class Position:
    """
    Open holding of one instrument, valued in the base currency.

    avg_cost_in_base is the all-time average buy cost: every buy ever made,
    including units that were later sold.
    """

    ticker: str
    asset_type: str
    quantity: Decimal
    avg_cost_in_base: Decimal
    current_price: Decimal
    current_price_currency: str
    market_value_in_base: Decimal
    cost_basis_in_base: Decimal
    gain_loss_in_base: Decimal
    gain_loss_percent: Decimal


@dataclass(frozen=True)
class Totals:
    """Portfolio-wide sums over open positions."""

    total_invested: Decimal = ZERO
    total_market_value: Decimal = ZERO
    total_gain_loss: Decimal = ZERO
    total_gain_loss_percent: Decimal = ZERO


@dataclass(frozen=True)
class AllocationItem:
    """Market value of one asset type."""

    asset_type: str
    market_value_in_base: Decimal
    percentage: Decimal = ZERO


@dataclass(frozen=True)
class ClosedTrade:
    """A sell that was matched against the average cost at the time of sale."""

    ticker: str
    trade_date: date
    quantity: Decimal
    proceeds_in_base: Decimal
    cost_in_base: Decimal
    profit_in_base: Decimal

    @property
    def is_win(self) -> bool:
        # break-even counts as a loss
        return self.profit_in_base > ZERO


@dataclass(frozen=True)
class RealizedGains:
    """Win/loss statistics over every counted sell."""

    winning_trades: int = 0
    losing_trades: int = 0
    total_closed_trades: int = 0
    win_ratio: Decimal = ZERO
    total_realized_in_base: Decimal = ZERO
    closed_trades: tuple[ClosedTrade, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "closed_trades", tuple(self.closed_trades))


@dataclass(frozen=True)
class PortfolioReport:
    """
    Everything the presentation layer renders for one book.

    Sequence fields are coerced to tuples; a memoized report is shared
    between callers.
    """

    base_currency: str
    positions: tuple[Position, ...] = ()
    totals: Totals = field(default_factory=Totals)
    allocation: tuple[AllocationItem, ...] = ()
    realized_gains: RealizedGains = field(default_factory=RealizedGains)
    missing_prices: tuple[str, ...] = ()
    missing_rates: tuple[str, ...] = ()
    as_of: Optional[datetime] = None

    def __post_init__(self) -> None:
        for name in ("positions", "allocation", "missing_prices", "missing_rates"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
