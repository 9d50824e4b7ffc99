"""View models for service outputs."""

from portfolio_tracker.domain.views.portfolio import (
    Position,
    Totals,
    AllocationItem,
    ClosedTrade,
    RealizedGains,
    PortfolioReport,
)

__all__ = [
    "Position",
    "Totals",
    "AllocationItem",
    "ClosedTrade",
    "RealizedGains",
    "PortfolioReport",
]
