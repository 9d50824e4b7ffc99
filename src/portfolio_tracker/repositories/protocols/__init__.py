"""Repository protocol definitions (interfaces)."""

from portfolio_tracker.repositories.protocols.book_repo import BookRepository
from portfolio_tracker.repositories.protocols.transaction_repo import TransactionRepository

__all__ = [
    "BookRepository",
    "TransactionRepository",
]
