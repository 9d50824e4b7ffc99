"""SQLAlchemy implementation of BookRepository."""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from portfolio_tracker.domain.models import Book
from portfolio_tracker.repositories.sqlalchemy.orm_models import BookORM


class SqlAlchemyBookRepository:
    """SQLAlchemy-backed book repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, book: Book) -> Book:
        """Persist a new book."""
        orm_book = BookORM(
            book_id=book.book_id,
            name=book.name,
            created_at=book.created_at or datetime.utcnow(),
        )
        self._db.add(orm_book)
        self._db.commit()
        self._db.refresh(orm_book)
        return self._to_domain(orm_book)

    def get_by_id(self, book_id: str) -> Optional[Book]:
        """Retrieve book by ID."""
        orm_book = self._db.query(BookORM).filter(BookORM.book_id == book_id).first()
        return self._to_domain(orm_book) if orm_book else None

    def get_by_name(self, name: str) -> Optional[Book]:
        """Retrieve book by name."""
        orm_book = self._db.query(BookORM).filter(BookORM.name == name).first()
        return self._to_domain(orm_book) if orm_book else None

    def list_all(self) -> list[Book]:
        """List all books."""
        orm_books = self._db.query(BookORM).order_by(BookORM.name).all()
        return [self._to_domain(b) for b in orm_books]

    @staticmethod
    def _to_domain(orm: BookORM) -> Book:
        """Convert ORM model to domain model."""
        return Book(
            book_id=orm.book_id,
            name=orm.name,
            created_at=orm.created_at,
        )
