"""
Advice Router
Serves the rule-based advisory engine behind the GetWise dashboard page
"""
import logging
import random
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from app.advisory import AdvisoryEngine, CurrencyFormatter, RetirementAssumptions, load_advisory_config
from app.core.config import settings
from app.models.snapshot import AdviceResponse, FinancialSnapshot, QueryRequest

router = APIRouter()
logger = logging.getLogger(__name__)


def build_advisory_engine() -> AdvisoryEngine:
    retirement = RetirementAssumptions(
        current_age=settings.RETIREMENT_CURRENT_AGE,
        retirement_age=settings.RETIREMENT_AGE,
        years_in_retirement=settings.RETIREMENT_YEARS_IN_RETIREMENT,
        inflation_rate=settings.RETIREMENT_INFLATION_RATE,
        pre_retirement_return=settings.RETIREMENT_PRE_RETURN,
        post_retirement_return=settings.RETIREMENT_POST_RETURN,
        expense_ratio=settings.RETIREMENT_EXPENSE_RATIO,
    )
    return AdvisoryEngine(
        config=load_advisory_config(settings.CATEGORY_GUIDELINES_JSON, retirement=retirement),
        formatter=CurrencyFormatter(symbol=settings.CURRENCY_SYMBOL, grouping=settings.CURRENCY_GROUPING),
        rng=random.Random(settings.ADVICE_RANDOM_SEED),
    )


advisory_engine = build_advisory_engine()


def get_advisory_engine() -> AdvisoryEngine:
    return advisory_engine


@router.post("/financial", response_model=AdviceResponse)
def financial_advice(
    snapshot: Optional[FinancialSnapshot] = Body(None),
    engine: AdvisoryEngine = Depends(get_advisory_engine),
):
    """Overall health assessment, category notes and the 50/30/20 split."""
    return AdviceResponse(kind="financial", advice=engine.generate_financial_advice(snapshot))


@router.post("/investment", response_model=AdviceResponse)
def investment_advice(
    snapshot: Optional[FinancialSnapshot] = Body(None),
    engine: AdvisoryEngine = Depends(get_advisory_engine),
):
    return AdviceResponse(kind="investment", advice=engine.generate_investment_advice(snapshot))


@router.post("/savings", response_model=AdviceResponse)
def savings_tips(
    snapshot: Optional[FinancialSnapshot] = Body(None),
    engine: AdvisoryEngine = Depends(get_advisory_engine),
):
    return AdviceResponse(kind="savings", advice=engine.generate_savings_tips(snapshot))


@router.post("/budget", response_model=AdviceResponse)
def budget_plan(
    snapshot: Optional[FinancialSnapshot] = Body(None),
    engine: AdvisoryEngine = Depends(get_advisory_engine),
):
    return AdviceResponse(kind="budget", advice=engine.generate_budget_plan(snapshot))


@router.post("/debt", response_model=AdviceResponse)
def debt_advice(
    snapshot: Optional[FinancialSnapshot] = Body(None),
    engine: AdvisoryEngine = Depends(get_advisory_engine),
):
    return AdviceResponse(kind="debt", advice=engine.generate_debt_management_advice(snapshot))


@router.post("/emergency-fund", response_model=AdviceResponse)
def emergency_fund_advice(
    snapshot: Optional[FinancialSnapshot] = Body(None),
    engine: AdvisoryEngine = Depends(get_advisory_engine),
):
    return AdviceResponse(kind="emergency_fund", advice=engine.generate_emergency_fund_advice(snapshot))


@router.post("/retirement", response_model=AdviceResponse)
def retirement_advice(
    snapshot: Optional[FinancialSnapshot] = Body(None),
    current_age: Optional[int] = Query(None, ge=0, le=100),
    retirement_age: Optional[int] = Query(None, ge=1, le=100),
    engine: AdvisoryEngine = Depends(get_advisory_engine),
):
    """
    Retirement projection. The age assumptions default to the configured
    values and can be overridden per request.
    """
    defaults = engine.config.retirement
    try:
        assumptions = RetirementAssumptions(
            current_age=current_age if current_age is not None else defaults.current_age,
            retirement_age=retirement_age if retirement_age is not None else defaults.retirement_age,
            years_in_retirement=defaults.years_in_retirement,
            inflation_rate=defaults.inflation_rate,
            pre_retirement_return=defaults.pre_retirement_return,
            post_retirement_return=defaults.post_retirement_return,
            expense_ratio=defaults.expense_ratio,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AdviceResponse(
        kind="retirement",
        advice=engine.generate_retirement_advice(snapshot, assumptions=assumptions),
    )


@router.post("/categories/{name}", response_model=AdviceResponse)
def category_advice(
    name: str,
    snapshot: Optional[FinancialSnapshot] = Body(None),
    engine: AdvisoryEngine = Depends(get_advisory_engine),
):
    advice = engine.category_advice_by_name(name, snapshot)
    if advice is None:
        raise HTTPException(status_code=404, detail=f"Category '{name}' not found in snapshot")
    return AdviceResponse(kind="category", advice=advice)


@router.post("/query", response_model=AdviceResponse)
def custom_query(request: QueryRequest, engine: AdvisoryEngine = Depends(get_advisory_engine)):
    """
    Answer a free-text question. The first keyword found in the question picks
    the generator; unmatched questions get a summary of the user's balance.
    """
    try:
        answer = engine.route_custom_query(request.query, request.snapshot)
    except Exception as e:
        logger.error(f"Error answering query: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error answering query: {str(e)}")

    logger.info(f"Answered query with '{answer.topic}' advice")
    return AdviceResponse(kind=answer.topic, advice=answer.advice)
