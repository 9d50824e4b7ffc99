"""Domain models package."""

from portfolio_tracker.domain.models.enums import TransactionType, AssetType, OversellPolicy
from portfolio_tracker.domain.models.book import Book
from portfolio_tracker.domain.models.transaction import Transaction
from portfolio_tracker.domain.models.market import (
    PriceQuote,
    ExchangeRates,
    MarketSnapshot,
)

__all__ = [
    "TransactionType",
    "AssetType",
    "OversellPolicy",
    "Book",
    "Transaction",
    "PriceQuote",
    "ExchangeRates",
    "MarketSnapshot",
]
