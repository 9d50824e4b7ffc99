"""
Unit tests for LedgerService.

Tests cover:
- Book creation and lookup
- Transaction recording and validation
- Defaults (currency, fee, trade date)
- Oversell rejection at the append boundary
- Listing order
"""

from datetime import date, time
from decimal import Decimal
from unittest.mock import patch

import pytest

from portfolio_tracker.core.exceptions import (
    InsufficientSharesError,
    NotFoundError,
    ValidationError,
)
from portfolio_tracker.domain.models import OversellPolicy, TransactionType
from portfolio_tracker.services import LedgerService, TransactionCreate


def buy_data(book_id: str, **overrides) -> TransactionCreate:
    data = dict(
        book_id=book_id,
        txn_type=TransactionType.BUY,
        ticker="MELI",
        quantity=Decimal("10"),
        price=Decimal("1200"),
        trade_date=date(2024, 1, 10),
    )
    data.update(overrides)
    return TransactionCreate(**data)


# =============================================================================
# BOOKS
# =============================================================================


class TestBooks:
    """Tests for book management."""

    def test_create_book(self, ledger_service):
        """
        GIVEN no books
        WHEN creating one
        THEN it is persisted with an ID and timestamp
        """
        book = ledger_service.create_book("  Cartera Principal ")

        assert book.book_id
        assert book.name == "Cartera Principal"
        assert book.created_at is not None
        assert ledger_service.get_book(book.book_id).name == "Cartera Principal"

    def test_duplicate_name_rejected(self, ledger_service):
        ledger_service.create_book("Main")

        with pytest.raises(ValidationError, match="already exists"):
            ledger_service.create_book("Main")

    def test_empty_name_rejected(self, ledger_service):
        with pytest.raises(ValidationError):
            ledger_service.create_book("   ")

    def test_get_missing_book(self, ledger_service):
        with pytest.raises(NotFoundError):
            ledger_service.get_book("nope")

    def test_list_books(self, ledger_service):
        ledger_service.create_book("A")
        ledger_service.create_book("B")

        assert sorted(b.name for b in ledger_service.list_books()) == ["A", "B"]


# =============================================================================
# RECORDING
# =============================================================================


class TestRecordTransaction:
    """Tests for the append path."""

    def test_record_buy(self, ledger_service, book_factory):
        """
        GIVEN a book
        WHEN recording a valid buy
        THEN it is stored with normalized fields and defaults
        """
        book = book_factory()

        txn = ledger_service.record_transaction(buy_data(
            book.book_id, ticker=" meli ", txn_type="buy", asset_type="equity",
        ))

        assert txn.txn_id
        assert txn.ticker == "MELI"
        assert txn.txn_type == TransactionType.BUY
        assert txn.asset_type == "EQUITY"
        assert txn.currency == "ARS"
        assert txn.fee == Decimal("0")
        assert ledger_service.list_transactions(book.book_id) == [txn]

    def test_amount_strings_parsed(self, ledger_service, book_factory):
        book = book_factory()

        txn = ledger_service.record_transaction(buy_data(
            book.book_id, quantity="2.5", price="195.10", fee="1.5", currency="usd",
        ))

        assert txn.quantity == Decimal("2.5")
        assert txn.price == Decimal("195.10")
        assert txn.fee == Decimal("1.5")
        assert txn.currency == "USD"

    def test_trade_date_defaults_to_today(self, ledger_service, book_factory):
        book = book_factory()

        with patch(
            "portfolio_tracker.services.ledger_service.today_in",
            return_value=date(2024, 6, 15),
        ):
            txn = ledger_service.record_transaction(buy_data(book.book_id, trade_date=None))

        assert txn.trade_date == date(2024, 6, 15)

    def test_trade_date_string_parsed(self, ledger_service, book_factory):
        book = book_factory()

        txn = ledger_service.record_transaction(buy_data(book.book_id, trade_date="2024-03-15"))

        assert txn.trade_date == date(2024, 3, 15)

    def test_trade_time_from_datetime_string(self, ledger_service, book_factory):
        book = book_factory()

        txn = ledger_service.record_transaction(
            buy_data(book.book_id, trade_date="2024-03-15 15:30")
        )

        assert txn.trade_date == date(2024, 3, 15)
        assert txn.trade_time == time(15, 30)

    def test_explicit_trade_time_persisted(self, ledger_service, book_factory):
        book = book_factory()

        ledger_service.record_transaction(buy_data(book.book_id, trade_time="09:15"))

        stored = ledger_service.list_transactions(book.book_id)[0]
        assert stored.trade_time == time(9, 15)

    @pytest.mark.parametrize("missing", ["ticker", "quantity", "price"])
    def test_missing_required_field(self, ledger_service, book_factory, transaction_repo, missing):
        """
        GIVEN a record lacking ticker, quantity or price
        WHEN recording it
        THEN ValidationError is raised and nothing is written
        """
        book = book_factory()

        with pytest.raises(ValidationError, match=missing):
            ledger_service.record_transaction(buy_data(book.book_id, **{missing: None}))

        assert transaction_repo.list_by_book(book.book_id) == []

    @pytest.mark.parametrize("overrides", [
        {"quantity": Decimal("0")},
        {"quantity": Decimal("-1")},
        {"price": Decimal("-0.01")},
        {"fee": Decimal("-1")},
        {"quantity": "ten"},
        {"price": "NaN"},
        {"currency": "U$D"},
        {"txn_type": "DIVIDEND"},
        {"asset_type": ""},
        {"trade_date": "not a date"},
        {"trade_time": "quarter past never"},
        {"quantity": "0.123456789"},
        {"price": Decimal("1200.000000001")},
        {"fee": 0.000000005},
    ])
    def test_invalid_values(self, ledger_service, book_factory, transaction_repo, overrides):
        book = book_factory()

        with pytest.raises(ValidationError):
            ledger_service.record_transaction(buy_data(book.book_id, **overrides))

        assert transaction_repo.list_by_book(book.book_id) == []

    def test_eight_decimal_places_accepted(self, ledger_service, book_factory):
        """
        GIVEN amounts at the stored precision, one with trailing zeros beyond it
        WHEN recording them
        THEN they are stored without rounding
        """
        book = book_factory()

        txn = ledger_service.record_transaction(buy_data(
            book.book_id, quantity="0.12345678", price="1200.5000000000",
        ))

        stored = ledger_service.list_transactions(book.book_id)[0]
        assert txn.quantity == Decimal("0.12345678")
        assert stored.quantity == Decimal("0.12345678")
        assert stored.price == Decimal("1200.5")

    def test_too_many_decimal_places_rejected(self, ledger_service, book_factory):
        book = book_factory()

        with pytest.raises(ValidationError, match="at most 8 decimal places"):
            ledger_service.record_transaction(buy_data(book.book_id, quantity="0.123456789"))

    def test_zero_price_allowed(self, ledger_service, book_factory):
        book = book_factory()

        txn = ledger_service.record_transaction(buy_data(book.book_id, price=0))

        assert txn.price == Decimal("0")

    def test_unknown_book(self, ledger_service):
        with pytest.raises(NotFoundError):
            ledger_service.record_transaction(buy_data("missing-book"))


# =============================================================================
# OVERSELL
# =============================================================================


class TestOversellOnRecord:
    """Tests for sells that exceed the holding."""

    def test_default_policy_accepts_oversell(self, ledger_service, book_factory):
        book = book_factory()

        txn = ledger_service.record_transaction(
            buy_data(book.book_id, txn_type=TransactionType.SELL, quantity=Decimal("5"))
        )

        assert txn.is_sell

    def test_reject_policy_blocks_oversell(self, book_repo, transaction_repo, book_factory):
        """
        GIVEN a ledger configured to reject oversells and 10 units held
        WHEN recording a sell of 11
        THEN InsufficientSharesError is raised and nothing is written
        """
        service = LedgerService(
            book_repo, transaction_repo, oversell_policy=OversellPolicy.REJECT
        )
        book = book_factory()
        service.record_transaction(buy_data(book.book_id))

        with pytest.raises(InsufficientSharesError):
            service.record_transaction(buy_data(
                book.book_id, txn_type=TransactionType.SELL,
                quantity=Decimal("11"), trade_date=date(2024, 2, 1),
            ))

        service.record_transaction(buy_data(
            book.book_id, txn_type=TransactionType.SELL,
            quantity=Decimal("10"), trade_date=date(2024, 2, 1),
        ))
        assert len(transaction_repo.list_by_book(book.book_id)) == 2

    def test_reject_policy_respects_dates(self, book_repo, transaction_repo, book_factory):
        """
        GIVEN a buy dated after the sell being recorded
        WHEN recording the backdated sell under the reject policy
        THEN it is rejected because nothing was held on that date
        """
        service = LedgerService(
            book_repo, transaction_repo, oversell_policy=OversellPolicy.REJECT
        )
        book = book_factory()
        service.record_transaction(buy_data(book.book_id, trade_date=date(2024, 3, 1)))

        with pytest.raises(InsufficientSharesError):
            service.record_transaction(buy_data(
                book.book_id, txn_type=TransactionType.SELL,
                quantity=Decimal("1"), trade_date=date(2024, 2, 1),
            ))


# =============================================================================
# LISTING
# =============================================================================


class TestListTransactions:
    """Tests for listing a book's ledger."""

    def test_ordered_by_trade_date(self, ledger_service, book_factory):
        book = book_factory()
        late = ledger_service.record_transaction(buy_data(book.book_id, trade_date=date(2024, 3, 1)))
        early = ledger_service.record_transaction(buy_data(book.book_id, trade_date=date(2024, 1, 1)))
        same_day = ledger_service.record_transaction(
            buy_data(book.book_id, ticker="BMA", trade_date=date(2024, 3, 1))
        )

        assert ledger_service.list_transactions(book.book_id) == [early, late, same_day]
        assert ledger_service.list_transactions(book.book_id, newest_first=True) == [
            same_day, late, early,
        ]

    def test_same_day_ordered_by_trade_time(self, ledger_service, book_factory):
        """
        GIVEN an afternoon trade recorded before a morning trade on the same date
        WHEN listing the ledger
        THEN the morning trade comes first
        """
        book = book_factory()
        afternoon = ledger_service.record_transaction(
            buy_data(book.book_id, trade_date=date(2024, 3, 1), trade_time=time(15, 0))
        )
        morning = ledger_service.record_transaction(
            buy_data(book.book_id, trade_date=date(2024, 3, 1), trade_time=time(9, 0))
        )

        assert ledger_service.list_transactions(book.book_id) == [morning, afternoon]

    def test_unknown_book(self, ledger_service):
        with pytest.raises(NotFoundError):
            ledger_service.list_transactions("missing")
