"""Repository layer - data access abstractions and implementations."""

from portfolio_tracker.repositories.protocols import (
    BookRepository,
    TransactionRepository,
)

__all__ = [
    "BookRepository",
    "TransactionRepository",
]
