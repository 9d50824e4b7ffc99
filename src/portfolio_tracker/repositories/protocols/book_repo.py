"""Book repository protocol."""

from typing import Protocol, Optional

from portfolio_tracker.domain.models import Book


class BookRepository(Protocol):
    """Interface for book data access."""

    def create(self, book: Book) -> Book:
        """Persist a new book."""
        ...

    def get_by_id(self, book_id: str) -> Optional[Book]:
        """Retrieve book by ID."""
        ...

    def get_by_name(self, name: str) -> Optional[Book]:
        """Retrieve book by name."""
        ...

    def list_all(self) -> list[Book]:
        """List all books."""
        ...
