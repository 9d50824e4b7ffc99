"""Pydantic schemas for transaction endpoints."""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from portfolio_tracker.domain.models.enums import TransactionType


class TransactionCreateRequest(BaseModel):
    """
    Request schema for recording a transaction.

    ticker, quantity and price are optional here so that a missing field is
    reported by the ledger's own validation (HTTP 400) rather than as a 422.
    """

    txn_type: TransactionType = Field(..., description="BUY or SELL")
    ticker: Optional[str] = Field(default=None, max_length=32, description="Instrument identifier")
    quantity: Optional[Decimal] = Field(default=None, gt=0, description="Units transacted")
    price: Optional[Decimal] = Field(default=None, ge=0, description="Unit price in `currency`")
    currency: Optional[str] = Field(
        default=None,
        max_length=8,
        description="Currency of price and fee; defaults to the reporting currency",
    )
    asset_type: str = Field(default="EQUITY", max_length=32, description="Allocation tag")
    trade_date: Optional[date] = Field(default=None, description="Trade date; defaults to today")
    trade_time: Optional[time] = Field(
        default=None, description="Time of day; orders trades on the same date"
    )
    fee: Optional[Decimal] = Field(default=None, ge=0, description="Transaction cost")
    broker: Optional[str] = Field(default=None, max_length=64)
    note: Optional[str] = Field(default=None, max_length=500)

    @field_validator("ticker", "currency", "asset_type")
    @classmethod
    def uppercase_code(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class TransactionResponse(BaseModel):
    """Response schema for a single transaction."""

    model_config = {"from_attributes": True}

    txn_id: str
    book_id: str
    trade_date: date
    trade_time: Optional[time] = None
    txn_type: TransactionType
    ticker: str
    asset_type: str
    quantity: Decimal
    price: Decimal
    currency: str
    fee: Decimal
    broker: Optional[str] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None


class TransactionListResponse(BaseModel):
    """Response schema for listing transactions."""

    transactions: list[TransactionResponse]
    count: int
