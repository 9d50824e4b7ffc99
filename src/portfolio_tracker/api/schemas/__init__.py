"""Pydantic schemas for API request/response."""

from portfolio_tracker.api.schemas.book import (
    BookCreate,
    BookResponse,
    BookListResponse,
)
from portfolio_tracker.api.schemas.transaction import (
    TransactionCreateRequest,
    TransactionResponse,
    TransactionListResponse,
)
from portfolio_tracker.api.schemas.portfolio import (
    PositionResponse,
    TotalsResponse,
    AllocationItemResponse,
    ClosedTradeResponse,
    RealizedGainsResponse,
    PortfolioReportResponse,
)

__all__ = [
    "BookCreate",
    "BookResponse",
    "BookListResponse",
    "TransactionCreateRequest",
    "TransactionResponse",
    "TransactionListResponse",
    "PositionResponse",
    "TotalsResponse",
    "AllocationItemResponse",
    "ClosedTradeResponse",
    "RealizedGainsResponse",
    "PortfolioReportResponse",
]
