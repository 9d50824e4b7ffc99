"""Domain layer - pure business models with no external dependencies."""

from portfolio_tracker.domain.models import (
    Book,
    Transaction,
    TransactionType,
    AssetType,
    OversellPolicy,
    PriceQuote,
    ExchangeRates,
    MarketSnapshot,
)

__all__ = [
    "Book",
    "Transaction",
    "TransactionType",
    "AssetType",
    "OversellPolicy",
    "PriceQuote",
    "ExchangeRates",
    "MarketSnapshot",
]
