"""SQLAlchemy implementation of TransactionRepository."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from portfolio_tracker.domain.models import Transaction
from portfolio_tracker.repositories.sqlalchemy.orm_models import TransactionORM


class SqlAlchemyTransactionRepository:
    """SQLAlchemy-backed transaction repository (append-only)."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        orm_txn = self._to_orm(transaction)
        self._db.add(orm_txn)
        self._db.commit()
        self._db.refresh(orm_txn)
        return self._to_domain(orm_txn)

    def list_by_book(self, book_id: str) -> list[Transaction]:
        """List all transactions for a book, in the order they were recorded."""
        query = (
            self._db.query(TransactionORM)
            .filter(TransactionORM.book_id == book_id)
            .order_by(TransactionORM.id)
        )
        return [self._to_domain(t) for t in query.all()]

    @staticmethod
    def _to_orm(txn: Transaction) -> TransactionORM:
        """Convert domain model to ORM model."""
        return TransactionORM(
            txn_id=txn.txn_id,
            book_id=txn.book_id,
            trade_date=txn.trade_date,
            trade_time=txn.trade_time,
            txn_type=txn.txn_type,
            ticker=txn.ticker,
            asset_type=txn.asset_type,
            quantity=txn.quantity,
            price=txn.price,
            currency=txn.currency,
            fee=txn.fee,
            broker=txn.broker,
            note=txn.note,
            created_at=txn.created_at or datetime.utcnow(),
        )

    @staticmethod
    def _to_domain(orm: TransactionORM) -> Transaction:
        """Convert ORM model to domain model."""
        return Transaction(
            txn_id=orm.txn_id,
            book_id=orm.book_id,
            trade_date=orm.trade_date,
            trade_time=orm.trade_time,
            txn_type=orm.txn_type,
            ticker=orm.ticker,
            asset_type=orm.asset_type,
            quantity=Decimal(str(orm.quantity)),
            price=Decimal(str(orm.price)),
            currency=orm.currency,
            fee=Decimal(str(orm.fee)) if orm.fee is not None else Decimal("0"),
            broker=orm.broker,
            note=orm.note,
            created_at=orm.created_at,
        )
