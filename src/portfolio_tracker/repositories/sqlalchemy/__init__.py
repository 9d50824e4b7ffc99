"""SQLAlchemy repository implementations."""

from portfolio_tracker.repositories.sqlalchemy.database import (
    Base,
    create_db_engine,
    create_session_factory,
    init_db,
    session_scope,
)
from portfolio_tracker.repositories.sqlalchemy.book_repo import SqlAlchemyBookRepository
from portfolio_tracker.repositories.sqlalchemy.transaction_repo import (
    SqlAlchemyTransactionRepository,
)

__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "init_db",
    "session_scope",
    "SqlAlchemyBookRepository",
    "SqlAlchemyTransactionRepository",
]
