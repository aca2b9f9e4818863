"""
Static advisory tables.

Everything here is built once at import time and never mutated. Mappings are
wrapped in ``MappingProxyType`` and sequences are tuples, so a single
``AdvisoryConfig`` can be shared by every request.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_KEY = "default"


@dataclass(frozen=True)
class CategoryGuideline:
    """Share of monthly income a category should take (``ideal``) and the level
    above which spending is flagged as significantly high (``high``)."""

    ideal: float
    high: float


@dataclass(frozen=True)
class HealthTier:
    name: str
    min_ratio: float
    assessment: str  # formatted with ``percent``
    tips: Tuple[str, ...]


@dataclass(frozen=True)
class AssetAllocation:
    equity: int
    debt: int
    liquid: int


@dataclass(frozen=True)
class RetirementAssumptions:
    current_age: int = 30
    retirement_age: int = 60
    years_in_retirement: int = 20
    inflation_rate: float = 0.06
    pre_retirement_return: float = 0.10
    post_retirement_return: float = 0.07
    expense_ratio: float = 0.8

    def __post_init__(self) -> None:
        if self.retirement_age <= self.current_age:
            raise ValueError("retirement_age must be greater than current_age")
        if self.years_in_retirement <= 0:
            raise ValueError("years_in_retirement must be positive")
        if self.post_retirement_return <= 0:
            raise ValueError("post_retirement_return must be positive")

    @property
    def years_to_retirement(self) -> int:
        return self.retirement_age - self.current_age

    @property
    def life_expectancy(self) -> int:
        return self.retirement_age + self.years_in_retirement


# Spending ratio thresholds (expenses / income)
CRITICAL_SPENDING = 0.9
HIGH_SPENDING = 0.7
MODERATE_SPENDING = 0.5

HEALTH_TIERS: Tuple[HealthTier, ...] = (
    HealthTier(
        name="critical",
        min_ratio=CRITICAL_SPENDING,
        assessment=(
            "Your spending is at a critical level ({percent}% of income). "
            "Immediate action is needed to reduce expenses and avoid debt."
        ),
        tips=(
            "Implement a strict budget for all essential expenses",
            "Temporarily freeze all non-essential spending",
            "Consider additional income sources to boost your earnings",
            "Set up automatic transfers to savings right after receiving income",
        ),
    ),
    HealthTier(
        name="high",
        min_ratio=HIGH_SPENDING,
        assessment=(
            "Your spending is high ({percent}% of income). "
            "You should focus on reducing expenses to build savings."
        ),
        tips=(
            "Aim to reduce monthly expenses by 15-20%",
            "Prioritize needs over wants in your spending decisions",
            "Build an emergency fund with at least 3 months of expenses",
            "Consider the 50/30/20 rule: 50% needs, 30% wants, 20% savings",
        ),
    ),
    HealthTier(
        name="moderate",
        min_ratio=MODERATE_SPENDING,
        assessment=(
            "Your spending is moderate ({percent}% of income). "
            "There's room to increase savings and investments."
        ),
        tips=(
            "Increase your savings rate by 5-10%",
            "Consider setting up automatic transfers to investment accounts",
            "Build an emergency fund with 6 months of expenses",
            "Review and optimize your tax planning strategies",
        ),
    ),
    HealthTier(
        name="low",
        min_ratio=float("-inf"),
        assessment=(
            "Your spending is well-controlled ({percent}% of income). "
            "Focus on optimizing investments and long-term financial planning."
        ),
        tips=(
            "Maximize tax-advantaged investment options",
            "Consider diversifying your investment portfolio",
            "Set specific financial goals for your savings",
            "Review insurance coverage to ensure adequate protection",
        ),
    ),
)

CATEGORY_GUIDELINES: Mapping[str, CategoryGuideline] = MappingProxyType({
    "Housing": CategoryGuideline(ideal=0.3, high=0.4),
    "Food": CategoryGuideline(ideal=0.15, high=0.25),
    "Transportation": CategoryGuideline(ideal=0.1, high=0.15),
    "Entertainment": CategoryGuideline(ideal=0.05, high=0.1),
    "Shopping": CategoryGuideline(ideal=0.1, high=0.2),
    "Utilities": CategoryGuideline(ideal=0.08, high=0.12),
    "Healthcare": CategoryGuideline(ideal=0.05, high=0.1),
    "Education": CategoryGuideline(ideal=0.1, high=0.15),
    DEFAULT_KEY: CategoryGuideline(ideal=0.1, high=0.15),
})

EXPENSE_REDUCTION_TIPS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Housing": (
        "Consider renegotiating your rent or refinancing your home loan",
        "Look for a roommate to share housing costs",
        "Explore more affordable housing options if your rent exceeds 30% of income",
    ),
    "Food": (
        "Plan meals in advance and prepare a shopping list to avoid impulse purchases",
        "Cook at home more often and limit eating out to special occasions",
        "Buy groceries in bulk and look for seasonal produce which is typically cheaper",
    ),
    "Transportation": (
        "Consider using public transportation or carpooling to save on fuel costs",
        "Maintain your vehicle regularly to avoid costly repairs",
        "Compare insurance providers annually to ensure the best rates",
    ),
    "Entertainment": (
        "Look for free or low-cost entertainment options in your area",
        "Consider sharing subscription services with family or friends",
        "Set a monthly entertainment budget and stick to it",
    ),
    "Shopping": (
        "Distinguish between needs and wants before making purchases",
        "Wait 24-48 hours before making non-essential purchases",
        "Look for sales, discounts, or cashback offers",
    ),
    "Utilities": (
        "Invest in energy-efficient appliances to reduce electricity bills",
        "Consider switching to a different service provider for better rates",
        "Reduce usage during peak hours when rates may be higher",
    ),
    "Healthcare": (
        "Consider preventive care to avoid costly medical treatments",
        "Compare prices for medications and ask about generic alternatives",
        "Review your health insurance plan for the best coverage",
    ),
    "Education": (
        "Look for scholarships, grants, or financial aid opportunities",
        "Consider online courses or community colleges for lower costs",
        "Invest in skills that can increase your earning potential",
    ),
    DEFAULT_KEY: (
        "Track all expenses in this category to identify unnecessary spending",
        "Set a monthly budget limit for this category",
        "Look for more affordable alternatives or bulk purchase options",
    ),
})

# Extra benchmarking copy for a few well-known categories
CATEGORY_BENCHMARKS: Mapping[str, str] = MappingProxyType({
    "Housing": (
        "In urban areas, the recommended housing expense is 25-30% of income, "
        "while in metro cities it may reach up to 35-40%."
    ),
    "Food": (
        "A single person typically spends ₹6,000-₹10,000 per month on food, "
        "while a family of four spends ₹15,000-₹25,000 per month."
    ),
    "Transportation": (
        "The average cost of commuting in urban areas ranges from ₹3,000-₹6,000 "
        "per month, excluding vehicle loans."
    ),
})

# Monthly income levels, highest first
INCOME_LEVELS: Tuple[Tuple[str, float], ...] = (
    ("VERY_HIGH", 200000),
    ("HIGH", 100000),
    ("MEDIUM", 50000),
    ("LOW", float("-inf")),
)

SPENDING_BUCKETS: Tuple[Tuple[str, float], ...] = (
    ("HIGH_SPENDING", HIGH_SPENDING),
    ("MODERATE_SPENDING", MODERATE_SPENDING),
    ("LOW_SPENDING", float("-inf")),
)

INVESTMENT_SUGGESTIONS: Mapping[str, Mapping[str, Tuple[str, ...]]] = MappingProxyType({
    "LOW": MappingProxyType({
        "LOW_SPENDING": (
            "Consider starting a recurring deposit with ₹1,000-₹2,000 monthly",
            "Invest in a conservative mutual fund SIP of ₹500-₹1,000 monthly",
            "Open a PPF account with minimum contribution of ₹500 monthly",
        ),
        "MODERATE_SPENDING": (
            "Set up an emergency fund with 3 months of expenses",
            "Consider investing ₹500 monthly in a low-risk mutual fund",
            "Look into government schemes like Sukanya Samriddhi or NSC",
        ),
        "HIGH_SPENDING": (
            "Focus on reducing expenses before considering investments",
            "Start small with ₹100-₹500 monthly in a recurring deposit",
            "Consider microinvestment options with minimal contributions",
        ),
    }),
    "MEDIUM": MappingProxyType({
        "LOW_SPENDING": (
            "Invest ₹5,000-₹10,000 monthly in equity mutual funds via SIP",
            "Consider tax-saving ELSS funds to save up to ₹46,800 in taxes",
            "Allocate ₹2,000-₹3,000 monthly to debt funds for stability",
        ),
        "MODERATE_SPENDING": (
            "Start an SIP of ₹3,000-₹5,000 in balanced mutual funds",
            "Consider NPS contribution of ₹2,000-₹4,000 monthly for retirement",
            "Invest in FDs or RDs with ₹2,000-₹5,000 monthly for short-term goals",
        ),
        "HIGH_SPENDING": (
            "Reduce discretionary spending and start with ₹1,000-₹2,000 SIP",
            "Build an emergency fund before other investments",
            "Consider liquid funds for short-term parking of excess funds",
        ),
    }),
    "HIGH": MappingProxyType({
        "LOW_SPENDING": (
            "Diversify with ₹15,000-₹25,000 monthly in equity, ₹10,000 in debt funds",
            "Consider direct equity investments of ₹10,000-₹20,000 monthly",
            "Explore REITs with ₹5,000-₹10,000 monthly for real estate exposure",
        ),
        "MODERATE_SPENDING": (
            "Allocate ₹10,000-₹15,000 monthly to multi-cap mutual funds",
            "Consider corporate bonds or debt funds with ₹5,000-₹10,000 monthly",
            "Invest in gold ETFs with ₹3,000-₹5,000 monthly for diversification",
        ),
        "HIGH_SPENDING": (
            "Focus on expense reduction and allocate ₹5,000-₹10,000 to mutual funds",
            "Consider conservative hybrid funds with ₹5,000 monthly",
            "Build emergency corpus of 6 months' expenses before other investments",
        ),
    }),
    "VERY_HIGH": MappingProxyType({
        "LOW_SPENDING": (
            "Consider professional portfolio management with ₹50,000+ monthly allocation",
            "Diversify across equity (40%), debt (30%), real estate (20%), and alternatives (10%)",
            "Consider international equity exposure with ₹15,000-₹25,000 monthly",
        ),
        "MODERATE_SPENDING": (
            "Allocate ₹25,000-₹40,000 monthly to a balanced portfolio",
            "Consider tax-free bonds and structured products for tax efficiency",
            "Explore alternative investments like P2P lending with ₹10,000-₹15,000 monthly",
        ),
        "HIGH_SPENDING": (
            "Review and optimize spending patterns before increasing investments",
            "Allocate ₹15,000-₹25,000 monthly to a conservative portfolio",
            "Consider tax planning with ₹10,000-₹15,000 monthly in ELSS and NPS",
        ),
    }),
})

ASSET_ALLOCATIONS: Mapping[str, AssetAllocation] = MappingProxyType({
    "HIGH_SPENDING": AssetAllocation(equity=30, debt=40, liquid=30),
    "MODERATE_SPENDING": AssetAllocation(equity=50, debt=30, liquid=20),
    "LOW_SPENDING": AssetAllocation(equity=70, debt=20, liquid=10),
})

# (minimum years to retirement, exclusive) -> (equity, debt, gold) ranges
RETIREMENT_PORTFOLIOS: Tuple[Tuple[int, Tuple[str, str, str]], ...] = (
    (20, ("70-75%", "20-25%", "5%")),
    (10, ("60-65%", "30-35%", "5%")),
    (-1, ("40-50%", "45-55%", "5%")),
)


@dataclass(frozen=True)
class AdvisoryConfig:
    """Bundle of the tables the engine reads. Built once, passed by reference."""

    guidelines: Mapping[str, CategoryGuideline] = field(default_factory=lambda: CATEGORY_GUIDELINES)
    reduction_tips: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: EXPENSE_REDUCTION_TIPS)
    benchmarks: Mapping[str, str] = field(default_factory=lambda: CATEGORY_BENCHMARKS)
    health_tiers: Tuple[HealthTier, ...] = HEALTH_TIERS
    income_levels: Tuple[Tuple[str, float], ...] = INCOME_LEVELS
    spending_buckets: Tuple[Tuple[str, float], ...] = SPENDING_BUCKETS
    investment_suggestions: Mapping[str, Mapping[str, Tuple[str, ...]]] = field(
        default_factory=lambda: INVESTMENT_SUGGESTIONS
    )
    asset_allocations: Mapping[str, AssetAllocation] = field(default_factory=lambda: ASSET_ALLOCATIONS)
    retirement_portfolios: Tuple[Tuple[int, Tuple[str, str, str]], ...] = RETIREMENT_PORTFOLIOS
    retirement: RetirementAssumptions = field(default_factory=RetirementAssumptions)

    def guideline_for(self, category: str) -> CategoryGuideline:
        return self.guidelines.get(category) or self.guidelines[DEFAULT_KEY]

    def tips_for(self, category: str) -> Tuple[str, ...]:
        return self.reduction_tips.get(category) or self.reduction_tips[DEFAULT_KEY]

    def is_known_category(self, category: str) -> bool:
        return category != DEFAULT_KEY and category in self.guidelines

    def with_retirement(self, retirement: RetirementAssumptions) -> "AdvisoryConfig":
        return replace(self, retirement=retirement)


def _load_guideline_overrides(path: Optional[str | Path]) -> Dict[str, CategoryGuideline]:
    if not path:
        return {}

    guideline_file = Path(path)
    if not guideline_file.exists():
        logger.warning(f"Category guideline file {guideline_file} not found, using built-in guidelines")
        return {}

    with guideline_file.open() as fp:
        raw = json.load(fp)

    return {name: CategoryGuideline(ideal=float(values["ideal"]), high=float(values["high"]))
            for name, values in raw.items()}


def load_advisory_config(
    guidelines_path: Optional[str | Path] = None,
    retirement: Optional[RetirementAssumptions] = None,
) -> AdvisoryConfig:
    """
    Build the engine configuration, merging guideline overrides from a JSON file
    of the form ``{"Food": {"ideal": 0.12, "high": 0.2}}`` over the defaults.
    """
    overrides = _load_guideline_overrides(guidelines_path)
    guidelines = CATEGORY_GUIDELINES
    if overrides:
        merged = dict(CATEGORY_GUIDELINES)
        merged.update(overrides)
        guidelines = MappingProxyType(merged)
        logger.info(f"Loaded {len(overrides)} category guideline overrides from {guidelines_path}")

    return AdvisoryConfig(
        guidelines=guidelines,
        retirement=retirement or RetirementAssumptions(),
    )
