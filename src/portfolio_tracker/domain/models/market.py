"""Market data models: price quotes and exchange-rate tables."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from portfolio_tracker.domain.models.transaction import ZERO, to_decimal

ONE = Decimal("1")


@dataclass(frozen=True)
class PriceQuote:
    """Current unit price of an instrument in its quote currency."""

    price: Decimal
    currency: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "price", to_decimal(self.price))
        object.__setattr__(self, "currency", self.currency.upper())


class ExchangeRates:
    """
    Read-only rate table into a single base (reporting) currency.

    Each entry maps a currency code to the multiplier that converts one unit of
    it into the base currency. The base currency always converts at 1; a
    currency with no entry converts at 0 so its amounts contribute nothing.
    """

    def __init__(self, base_currency: str, rates: Optional[Mapping[str, Any]] = None):
        self._base = base_currency.upper()
        self._rates: dict[str, Decimal] = {
            code.upper(): to_decimal(rate) for code, rate in (rates or {}).items()
        }
        self._rates[self._base] = ONE

    @classmethod
    def from_pair_codes(
        cls,
        pairs: Mapping[str, Any],
        base_currency: str,
    ) -> "ExchangeRates":
        """
        Build a table from pair codes such as {"USD_ARS": 1050.50}.

        "FROM_TO" quotes units of TO per unit of FROM. Pairs whose TO side is the
        base are used directly; pairs whose FROM side is the base are inverted.
        Pairs not touching the base currency are ignored. A bare code such as
        "USD" is taken as a plain multiplier into the base.
        """
        base = base_currency.upper()
        rates: dict[str, Decimal] = {}
        inverse: dict[str, Decimal] = {}
        for code, value in pairs.items():
            source, sep, target = code.upper().partition("_")
            rate = to_decimal(value)
            if not sep:
                rates[source] = rate
                continue
            if not source or not target:
                continue
            if target == base:
                rates[source] = rate
            elif source == base and rate != ZERO:
                inverse[target] = ONE / rate
        # direct quotes win over inverted ones
        for currency, rate in inverse.items():
            rates.setdefault(currency, rate)
        return cls(base, rates)

    @property
    def base_currency(self) -> str:
        return self._base

    def has_rate(self, currency: str) -> bool:
        return currency.upper() in self._rates

    def rate_for(self, currency: str) -> Decimal:
        """Multiplier into the base currency; 0 when the currency is unknown."""
        return self._rates.get(currency.upper(), ZERO)

    def to_base(self, amount: Decimal, currency: str) -> Decimal:
        return amount * self.rate_for(currency)

    def cache_key(self) -> tuple:
        """Hashable fingerprint of the table."""
        return (self._base, tuple(sorted(self._rates.items())))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExchangeRates):
            return NotImplemented
        return self.cache_key() == other.cache_key()

    def __hash__(self) -> int:
        return hash(self.cache_key())

    def __repr__(self) -> str:
        return f"ExchangeRates(base_currency={self._base!r}, rates={self._rates!r})"


@dataclass
class MarketSnapshot:
    """Prices and pair-code rates as of one point in time."""

    prices: dict[str, PriceQuote] = field(default_factory=dict)
    rates: dict[str, Decimal] = field(default_factory=dict)
    as_of: Optional[datetime] = None


def parse_rate(value: Any) -> Optional[Decimal]:
    """Parse a rate from a feed value; None when it is not a positive number."""
    try:
        rate = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not rate.is_finite() or rate <= ZERO:
        return None
    return rate
