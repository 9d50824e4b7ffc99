"""Transaction repository protocol."""

from typing import Protocol

from portfolio_tracker.domain.models import Transaction


class TransactionRepository(Protocol):
    """Interface for transaction (ledger) data access."""

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        ...

    def list_by_book(self, book_id: str) -> list[Transaction]:
        """List all transactions for a book, in the order they were recorded."""
        ...
