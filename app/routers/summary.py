"""
Summary Router
Turns raw transactions into the snapshot consumed by the advice endpoints
"""
import logging

from fastapi import APIRouter, HTTPException

from app.core.config import settings
from app.models.transaction import SummaryRequest, SummaryResponse
from app.utils.summary import SummaryAnalyzer

router = APIRouter()
logger = logging.getLogger(__name__)
summary_analyzer = SummaryAnalyzer(
    top_categories=settings.SUMMARY_TOP_CATEGORIES,
    max_days=settings.SUMMARY_MAX_DAYS,
)


@router.post("", response_model=SummaryResponse)
def summarize_transactions(request: SummaryRequest) -> SummaryResponse:
    """
    Summarize the given period: income, expenses, remaining balance, top
    expense categories and one record per day. When the previous period's
    transactions are sent too, the change in each total is included.
    """
    if request.start and request.end and request.start > request.end:
        raise HTTPException(status_code=400, detail="'from' must not be after 'to'")

    logger.info(f"Summarizing {len(request.transactions)} transactions")
    try:
        return summary_analyzer.summarize(
            request.transactions,
            previous=request.previous_transactions,
            start=request.start,
            end=request.end,
        )
    except ValueError as e:
        logger.warning(f"Rejected summary request: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))
