"""SQLAlchemy ORM model definitions."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from portfolio_tracker.repositories.sqlalchemy.database import Base
from portfolio_tracker.domain.models.enums import TransactionType
from portfolio_tracker.domain.models.transaction import AMOUNT_SCALE


class BookORM(Base):
    """SQLAlchemy model for Book."""

    __tablename__ = "books"

    book_id = Column(String(36), primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    transactions = relationship("TransactionORM", back_populates="book")


class TransactionORM(Base):
    """SQLAlchemy model for Transaction (ledger entry)."""

    __tablename__ = "transactions"

    # Surrogate key; also the recording order used for timestamp ties
    id = Column(Integer, primary_key=True, autoincrement=True)
    txn_id = Column(String(36), unique=True, nullable=False)
    book_id = Column(String(36), ForeignKey("books.book_id"), nullable=False, index=True)
    trade_date = Column(Date, nullable=False)
    trade_time = Column(Time, nullable=True)
    txn_type = Column(SqlEnum(TransactionType), nullable=False)
    ticker = Column(String(32), nullable=False)
    asset_type = Column(String(32), nullable=False)
    quantity = Column(Numeric(precision=24, scale=AMOUNT_SCALE), nullable=False)
    price = Column(Numeric(precision=24, scale=AMOUNT_SCALE), nullable=False)
    currency = Column(String(8), nullable=False)
    fee = Column(Numeric(precision=24, scale=AMOUNT_SCALE), default=Decimal("0"))
    broker = Column(String(64), nullable=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    book = relationship("BookORM", back_populates="transactions")
