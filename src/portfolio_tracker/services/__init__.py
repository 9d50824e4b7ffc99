"""Service layer - valuation engine and business logic orchestration."""

from portfolio_tracker.services.cost_basis_ledger import CostBasisLedger, Holding, sort_chronologically
from portfolio_tracker.services.position_consolidator import PositionConsolidator, Consolidation
from portfolio_tracker.services.portfolio_engine import (
    PortfolioEngine,
    ValuationConfig,
    evaluate_portfolio,
)
from portfolio_tracker.services.ledger_service import LedgerService, TransactionCreate
from portfolio_tracker.services.market_data_service import MarketDataService
from portfolio_tracker.services.analysis_service import AnalysisService

__all__ = [
    "CostBasisLedger",
    "Holding",
    "sort_chronologically",
    "PositionConsolidator",
    "Consolidation",
    "PortfolioEngine",
    "ValuationConfig",
    "evaluate_portfolio",
    "LedgerService",
    "TransactionCreate",
    "MarketDataService",
    "AnalysisService",
]
