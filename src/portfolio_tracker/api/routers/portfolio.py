"""Portfolio report endpoint."""

from fastapi import APIRouter, Depends, HTTPException

from portfolio_tracker.api.deps import get_analysis_service
from portfolio_tracker.api.schemas.portfolio import PortfolioReportResponse
from portfolio_tracker.core.exceptions import InsufficientSharesError, NotFoundError
from portfolio_tracker.services import AnalysisService

router = APIRouter(prefix="/books/{book_id}/portfolio", tags=["portfolio"])


@router.get("", response_model=PortfolioReportResponse)
def get_portfolio(
    book_id: str,
    analysis: AnalysisService = Depends(get_analysis_service),
):
    """
    Return the valued portfolio for a book.

    Positions, totals and allocation are in the reporting currency; realized
    gains summarize every closed sell.
    """
    try:
        report = analysis.portfolio_report(book_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InsufficientSharesError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return PortfolioReportResponse.from_report(report)
