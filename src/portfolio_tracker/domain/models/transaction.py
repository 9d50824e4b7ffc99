"""Transaction domain model."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional

from portfolio_tracker.domain.models.enums import AssetType, TransactionType

ZERO = Decimal("0")

# Decimal places stored for quantity, price and fee.
AMOUNT_SCALE = 8


def to_decimal(value: Any) -> Decimal:
    """Coerce int/float/str amounts to Decimal (floats via their repr)."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class Transaction:
    """
    Ledger transaction entry (source of truth).

    Immutable and hashable so a list of transactions can key a report cache.
    - price and fee are denominated in `currency`
    - fee defaults to 0 when absent
    - trade_date plus the optional trade_time order transactions; a datetime
      given as trade_date is split into the two. Entries with the same
      timestamp keep input order, and a missing time counts as midnight.
    """

    txn_id: str
    book_id: str
    trade_date: date
    txn_type: TransactionType
    ticker: str
    asset_type: str
    quantity: Decimal
    price: Decimal
    currency: str
    fee: Optional[Decimal] = ZERO
    broker: Optional[str] = None
    note: Optional[str] = None
    trade_time: Optional[time] = None
    created_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        # frozen dataclass: normalize through object.__setattr__
        if isinstance(self.txn_type, str) and not isinstance(self.txn_type, TransactionType):
            object.__setattr__(self, "txn_type", TransactionType(self.txn_type))
        if isinstance(self.asset_type, AssetType):
            object.__setattr__(self, "asset_type", self.asset_type.value)
        if isinstance(self.trade_date, datetime):
            # wall-clock time of day; the zone is dropped
            if self.trade_time is None:
                object.__setattr__(self, "trade_time", self.trade_date.time())
            object.__setattr__(self, "trade_date", self.trade_date.date())
        if self.trade_time is not None and self.trade_time.tzinfo is not None:
            object.__setattr__(self, "trade_time", self.trade_time.replace(tzinfo=None))
        object.__setattr__(self, "currency", self.currency.upper())
        object.__setattr__(self, "quantity", to_decimal(self.quantity))
        object.__setattr__(self, "price", to_decimal(self.price))
        object.__setattr__(self, "fee", ZERO if self.fee is None else to_decimal(self.fee))

    @property
    def is_buy(self) -> bool:
        return self.txn_type == TransactionType.BUY

    @property
    def is_sell(self) -> bool:
        return self.txn_type == TransactionType.SELL

    @property
    def traded_at(self) -> datetime:
        """Naive timestamp used for chronological ordering."""
        return datetime.combine(self.trade_date, self.trade_time or time.min)
