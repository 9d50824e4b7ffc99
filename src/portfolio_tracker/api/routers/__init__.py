"""API routers package."""

from portfolio_tracker.api.routers.books import router as books_router
from portfolio_tracker.api.routers.transactions import router as transactions_router
from portfolio_tracker.api.routers.portfolio import router as portfolio_router

__all__ = [
    "books_router",
    "transactions_router",
    "portfolio_router",
]
