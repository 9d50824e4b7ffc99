"""Pydantic schemas for the portfolio report."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from portfolio_tracker.domain.views import PortfolioReport


class PositionResponse(BaseModel):
    """One open position, amounts in the reporting currency."""

    ticker: str
    asset_type: str
    quantity: float
    avg_cost_in_base: float
    current_price: float
    current_price_currency: str
    market_value_in_base: float
    cost_basis_in_base: float
    gain_loss_in_base: float
    gain_loss_percent: float


class TotalsResponse(BaseModel):
    total_invested: float
    total_market_value: float
    total_gain_loss: float
    total_gain_loss_percent: float


class AllocationItemResponse(BaseModel):
    asset_type: str
    market_value_in_base: float
    percentage: float


class ClosedTradeResponse(BaseModel):
    ticker: str
    trade_date: date
    quantity: float
    proceeds_in_base: float
    cost_in_base: float
    profit_in_base: float


class RealizedGainsResponse(BaseModel):
    winning_trades: int
    losing_trades: int
    total_closed_trades: int
    win_ratio: float
    total_realized_in_base: float
    closed_trades: list[ClosedTradeResponse]


class PortfolioReportResponse(BaseModel):
    """Full valuation of a book."""

    base_currency: str
    positions: list[PositionResponse]
    totals: TotalsResponse
    allocation: list[AllocationItemResponse]
    realized_gains: RealizedGainsResponse
    missing_prices: list[str]
    missing_rates: list[str]
    as_of: Optional[datetime] = None

    @classmethod
    def from_report(cls, report: PortfolioReport) -> "PortfolioReportResponse":
        """Convert the Decimal-based report into float fields for JSON clients."""
        realized = report.realized_gains
        return cls(
            base_currency=report.base_currency,
            positions=[
                PositionResponse(
                    ticker=p.ticker,
                    asset_type=p.asset_type,
                    quantity=float(p.quantity),
                    avg_cost_in_base=float(p.avg_cost_in_base),
                    current_price=float(p.current_price),
                    current_price_currency=p.current_price_currency,
                    market_value_in_base=float(p.market_value_in_base),
                    cost_basis_in_base=float(p.cost_basis_in_base),
                    gain_loss_in_base=float(p.gain_loss_in_base),
                    gain_loss_percent=float(p.gain_loss_percent),
                )
                for p in report.positions
            ],
            totals=TotalsResponse(
                total_invested=float(report.totals.total_invested),
                total_market_value=float(report.totals.total_market_value),
                total_gain_loss=float(report.totals.total_gain_loss),
                total_gain_loss_percent=float(report.totals.total_gain_loss_percent),
            ),
            allocation=[
                AllocationItemResponse(
                    asset_type=item.asset_type,
                    market_value_in_base=float(item.market_value_in_base),
                    percentage=float(item.percentage),
                )
                for item in report.allocation
            ],
            realized_gains=RealizedGainsResponse(
                winning_trades=realized.winning_trades,
                losing_trades=realized.losing_trades,
                total_closed_trades=realized.total_closed_trades,
                win_ratio=float(realized.win_ratio),
                total_realized_in_base=float(realized.total_realized_in_base),
                closed_trades=[
                    ClosedTradeResponse(
                        ticker=t.ticker,
                        trade_date=t.trade_date,
                        quantity=float(t.quantity),
                        proceeds_in_base=float(t.proceeds_in_base),
                        cost_in_base=float(t.cost_in_base),
                        profit_in_base=float(t.profit_in_base),
                    )
                    for t in realized.closed_trades
                ],
            ),
            missing_prices=list(report.missing_prices),
            missing_rates=list(report.missing_rates),
            as_of=report.as_of,
        )
