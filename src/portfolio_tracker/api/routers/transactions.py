"""Transaction endpoints, scoped to a book."""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from portfolio_tracker.api.deps import get_ledger_service
from portfolio_tracker.api.schemas.transaction import (
    TransactionCreateRequest,
    TransactionListResponse,
    TransactionResponse,
)
from portfolio_tracker.core.exceptions import (
    InsufficientSharesError,
    NotFoundError,
    ValidationError,
)
from portfolio_tracker.services import LedgerService, TransactionCreate

router = APIRouter(prefix="/books/{book_id}/transactions", tags=["transactions"])


@router.post("", response_model=TransactionResponse, status_code=201)
def record_transaction(
    book_id: str,
    data: TransactionCreateRequest,
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Record a BUY or SELL in the book."""
    create = TransactionCreate(
        book_id=book_id,
        txn_type=data.txn_type,
        ticker=data.ticker,
        quantity=data.quantity,
        price=data.price,
        currency=data.currency,
        asset_type=data.asset_type,
        trade_date=data.trade_date,
        trade_time=data.trade_time,
        fee=data.fee,
        broker=data.broker,
        note=data.note,
    )
    try:
        txn = ledger.record_transaction(create)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except (ValidationError, InsufficientSharesError) as e:
        raise HTTPException(status_code=400, detail=e.message)
    return TransactionResponse.model_validate(txn)


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    book_id: str,
    order: Literal["asc", "desc"] = Query("desc", description="Trade date order"),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """List the book's transactions, newest first by default."""
    try:
        transactions = ledger.list_transactions(book_id, newest_first=(order == "desc"))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        count=len(transactions),
    )
