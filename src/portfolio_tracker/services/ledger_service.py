"""Ledger service for books and transaction recording."""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from portfolio_tracker.core.timezone import (
    DEFAULT_TZ_NAME,
    now_in,
    parse_trade_date,
    parse_trade_time,
    today_in,
)
from portfolio_tracker.core.exceptions import ValidationError, NotFoundError
from portfolio_tracker.domain.models import (
    AssetType,
    Book,
    ExchangeRates,
    OversellPolicy,
    Transaction,
    TransactionType,
)
from portfolio_tracker.domain.models.transaction import AMOUNT_SCALE, to_decimal
from portfolio_tracker.repositories.protocols import BookRepository, TransactionRepository
from portfolio_tracker.services.cost_basis_ledger import CostBasisLedger

logger = logging.getLogger(__name__)


@dataclass
class TransactionCreate:
    """Input data for recording a transaction."""

    book_id: str
    txn_type: Union[TransactionType, str]
    ticker: Optional[str] = None
    quantity: Optional[Any] = None
    price: Optional[Any] = None
    currency: Optional[str] = None
    asset_type: Union[AssetType, str] = AssetType.EQUITY
    trade_date: Optional[Union[date, datetime, str]] = None
    trade_time: Optional[Union[time, str]] = None
    fee: Optional[Any] = None
    broker: Optional[str] = None
    note: Optional[str] = None


class LedgerService:
    """
    Service for managing books and the append-only transaction ledger.

    record_transaction is the only write path for transactions: it validates
    the record completely before anything reaches the repository.
    """

    def __init__(
        self,
        book_repo: BookRepository,
        transaction_repo: TransactionRepository,
        base_currency: str = "ARS",
        oversell_policy: OversellPolicy = OversellPolicy.SKIP,
        tz_name: str = DEFAULT_TZ_NAME,
    ):
        self._book_repo = book_repo
        self._transaction_repo = transaction_repo
        self._base_currency = base_currency.upper()
        self._oversell_policy = OversellPolicy(oversell_policy)
        self._tz_name = tz_name

    def create_book(self, name: str) -> Book:
        """
        Create a new book.

        Args:
            name: Unique book name

        Returns:
            Created Book instance
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Book name is required")
        if self._book_repo.get_by_name(name):
            raise ValidationError(f"Book with name '{name}' already exists")

        book = Book(
            book_id=str(uuid.uuid4()),
            name=name,
            created_at=now_in(self._tz_name),
        )
        return self._book_repo.create(book)

    def get_book(self, book_id: str) -> Book:
        """Get book by ID."""
        book = self._book_repo.get_by_id(book_id)
        if not book:
            raise NotFoundError("Book", book_id)
        return book

    def list_books(self) -> list[Book]:
        """List all books."""
        return self._book_repo.list_all()

    def record_transaction(self, data: TransactionCreate) -> Transaction:
        """
        Validate and append a transaction to a book.

        Raises ValidationError (or NotFoundError for an unknown book) without
        writing anything when the record is incomplete or invalid.
        """
        transaction = self._build_transaction(data)

        if self._oversell_policy == OversellPolicy.REJECT and transaction.is_sell:
            self._check_sell_covered(transaction)

        created = self._transaction_repo.create(transaction)
        logger.info(
            "Recorded %s %s %s @ %s %s in book %s",
            created.txn_type.value, created.quantity, created.ticker,
            created.price, created.currency, created.book_id,
        )
        return created

    def list_transactions(self, book_id: str, newest_first: bool = False) -> list[Transaction]:
        """List a book's transactions by trade timestamp (ties in recording order)."""
        self.get_book(book_id)
        transactions = self._transaction_repo.list_by_book(book_id)
        ordered = sorted(transactions, key=lambda t: t.traded_at)
        if newest_first:
            # stable for ties: reverse the recording order too
            ordered.reverse()
        return ordered

    def _build_transaction(self, data: TransactionCreate) -> Transaction:
        """Validate input and build the domain record."""
        self.get_book(data.book_id)

        raw_type = (
            data.txn_type.value
            if isinstance(data.txn_type, TransactionType)
            else str(data.txn_type or "").strip().upper()
        )
        try:
            txn_type = TransactionType(raw_type)
        except ValueError:
            raise ValidationError(f"Unknown transaction type: {data.txn_type!r}")

        ticker = (data.ticker or "").strip().upper()
        if not ticker:
            raise ValidationError(f"{txn_type.value} requires a ticker")
        if data.quantity is None or data.quantity == "":
            raise ValidationError(f"{txn_type.value} requires a quantity")
        if data.price is None or data.price == "":
            raise ValidationError(f"{txn_type.value} requires a price")

        quantity = self._parse_amount(data.quantity, "quantity")
        price = self._parse_amount(data.price, "price")
        fee = Decimal("0") if data.fee in (None, "") else self._parse_amount(data.fee, "fee")

        if quantity <= 0:
            raise ValidationError(f"{txn_type.value} requires quantity > 0")
        if price < 0:
            raise ValidationError(f"{txn_type.value} requires price >= 0")
        if fee < 0:
            raise ValidationError("Fee cannot be negative")

        currency = (data.currency or self._base_currency).strip().upper()
        if not currency.isalpha():
            raise ValidationError(f"Invalid currency code: {data.currency!r}")

        asset_type = data.asset_type.value if isinstance(data.asset_type, AssetType) else data.asset_type
        asset_type = (asset_type or "").strip().upper()
        if not asset_type:
            raise ValidationError("Asset type is required")

        if data.trade_date is None or data.trade_date == "":
            trade_date = today_in(self._tz_name)
        else:
            trade_date = parse_trade_date(data.trade_date)
        trade_time = None
        if data.trade_time not in (None, ""):
            trade_time = parse_trade_time(data.trade_time)

        return Transaction(
            txn_id=str(uuid.uuid4()),
            book_id=data.book_id,
            trade_date=trade_date,
            txn_type=txn_type,
            ticker=ticker,
            asset_type=asset_type,
            quantity=quantity,
            price=price,
            currency=currency,
            fee=fee,
            broker=data.broker,
            note=data.note,
            trade_time=trade_time,
            created_at=now_in(self._tz_name),
        )

    def _check_sell_covered(self, transaction: Transaction) -> None:
        """Replay the book with the new sell; raises InsufficientSharesError on oversell."""
        existing = self._transaction_repo.list_by_book(transaction.book_id)
        relevant = [t for t in existing if t.ticker == transaction.ticker]
        ledger = CostBasisLedger(ExchangeRates(self._base_currency), OversellPolicy.REJECT)
        ledger.replay(relevant + [transaction])

    @staticmethod
    def _parse_amount(value: Any, field_name: str) -> Decimal:
        try:
            amount = to_decimal(value)
        except (InvalidOperation, ValueError, TypeError):
            raise ValidationError(f"Invalid {field_name}: {value!r}")
        if not amount.is_finite():
            raise ValidationError(f"Invalid {field_name}: {value!r}")
        if -amount.normalize().as_tuple().exponent > AMOUNT_SCALE:
            raise ValidationError(
                f"{field_name} supports at most {AMOUNT_SCALE} decimal places: {value!r}"
            )
        return amount
