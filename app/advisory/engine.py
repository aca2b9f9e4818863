from __future__ import annotations

import logging
import math
import random
from functools import wraps
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from app.advisory.formatting import CurrencyFormatter, percent, plain_percent, round_half_up
from app.advisory.guidelines import (
    CRITICAL_SPENDING,
    HIGH_SPENDING,
    MODERATE_SPENDING,
    AdvisoryConfig,
    HealthTier,
    RetirementAssumptions,
)
from app.advisory.query_router import RoutedAnswer, build_routes, route_query
from app.models.snapshot import CategorySpend, FinancialSnapshot

logger = logging.getLogger(__name__)

SnapshotLike = Union[FinancialSnapshot, Mapping[str, Any], None]

NO_DATA_MESSAGE = "Please provide your financial data to receive personalized advice."
NO_INVESTMENT_DATA_MESSAGE = "Please provide your financial data to receive personalized investment advice."
NO_QUERY_MESSAGE = "Please provide both a query and your financial data."

# Share of the remaining balance assumed to be available for each goal
DEBT_REPAYMENT_SHARE = 0.8
EMERGENCY_FUND_SHARE = 0.5

BUDGET_SPLIT = (
    ("Essential expenses", 0.5),
    ("Discretionary spending", 0.3),
    ("Savings and investments", 0.2),
)


def coerce_snapshot(snapshot: SnapshotLike) -> Optional[FinancialSnapshot]:
    if snapshot is None or isinstance(snapshot, FinancialSnapshot):
        return snapshot
    return FinancialSnapshot.model_validate(snapshot)


def _requires_snapshot(message: str):
    def decorator(func):
        @wraps(func)
        def wrapper(self, snapshot, *args, **kwargs):
            data = coerce_snapshot(snapshot)
            if data is None:
                return message
            return func(self, data, *args, **kwargs)
        return wrapper
    return decorator


def _bullets(items) -> str:
    return "".join(f"- {item}\n" for item in items)


class AdvisoryEngine:
    """
    Rule-based advisor turning a FinancialSnapshot into Markdown advice.

    The engine holds no per-user state. Its only moving part is ``rng``, used to
    sample savings tips; pass a seeded ``random.Random`` for repeatable output.
    """

    def __init__(
        self,
        config: Optional[AdvisoryConfig] = None,
        formatter: Optional[CurrencyFormatter] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or AdvisoryConfig()
        self.formatter = formatter or CurrencyFormatter()
        self._rng = rng or random.Random()

    def _cur(self, value: float) -> str:
        return self.formatter.currency(value)

    # ------------------------------------------------------------------
    # Classification and arithmetic
    # ------------------------------------------------------------------

    def classify_spending(self, spending_ratio: float) -> HealthTier:
        for tier in self.config.health_tiers:
            if spending_ratio >= tier.min_ratio:
                return tier
        return self.config.health_tiers[-1]

    def classify_income(self, income: float) -> str:
        for level, minimum in self.config.income_levels:
            if income >= minimum:
                return level
        return self.config.income_levels[-1][0]

    def classify_spending_bucket(self, spending_ratio: float) -> str:
        for bucket, minimum in self.config.spending_buckets:
            if spending_ratio >= minimum:
                return bucket
        return self.config.spending_buckets[-1][0]

    def category_potentials(self, snapshot: FinancialSnapshot) -> List[Tuple[CategorySpend, float]]:
        """Categories paired with their overspend against the ideal share, largest first."""
        potentials = []
        for category in snapshot.categories:
            guideline = self.config.guideline_for(category.name)
            recommended = snapshot.income_amount * guideline.ideal
            potentials.append((category, max(0.0, category.value - recommended)))
        return sorted(potentials, key=lambda item: item[1], reverse=True)

    def calculate_savings_potential(self, snapshot: SnapshotLike) -> int:
        data = coerce_snapshot(snapshot)
        if data is None:
            return 0
        return round_half_up(sum(potential for _, potential in self.category_potentials(data)))

    @staticmethod
    def calculate_recommended_investment(income: float, spending_ratio: float) -> int:
        if spending_ratio >= CRITICAL_SPENDING:
            return round_half_up(income * 0.05)
        if spending_ratio >= HIGH_SPENDING:
            return round_half_up(income * 0.1)
        if spending_ratio >= MODERATE_SPENDING:
            return round_half_up(income * 0.15)
        return round_half_up(income * (0.2 + (1 - spending_ratio) * 0.1))

    def ideal_budget(self, snapshot: FinancialSnapshot) -> Tuple[Dict[str, int], float]:
        """Recommended amount per category and what is left over for savings."""
        budget: Dict[str, int] = {}
        allocated = 0
        for category in snapshot.categories:
            amount = round_half_up(snapshot.income_amount * self.config.guideline_for(category.name).ideal)
            budget[category.name] = amount
            allocated += amount
        return budget, snapshot.income_amount - allocated

    def category_notes(self, snapshot: FinancialSnapshot) -> List[str]:
        notes = []
        for category in snapshot.categories:
            ratio = category.value / snapshot.income_amount
            guideline = self.config.guideline_for(category.name)
            tips = self.config.tips_for(category.name)
            spent = f"Your spending ({self._cur(category.value)}, {percent(ratio)}% of income)"

            if ratio > guideline.high:
                notes.append(
                    f"**{category.name}**: {spent} is significantly higher than recommended "
                    f"({plain_percent(guideline.high)}%). {tips[0]}"
                )
            elif ratio > guideline.ideal:
                notes.append(
                    f"**{category.name}**: {spent} is slightly above the ideal range "
                    f"({plain_percent(guideline.ideal)}%). {tips[1]}"
                )
        return notes

    # ------------------------------------------------------------------
    # Advice generators
    # ------------------------------------------------------------------

    @_requires_snapshot(NO_DATA_MESSAGE)
    def generate_financial_advice(self, snapshot: FinancialSnapshot) -> str:
        ratio = snapshot.spending_ratio
        tier = self.classify_spending(ratio)
        logger.debug(f"Spending ratio {ratio:.3f} classified as '{tier.name}'")

        parts = [
            "## Financial Health Assessment\n\n",
            f"{tier.assessment.format(percent=percent(ratio))}\n\n",
            "## Savings Recommendations\n\n",
            _bullets(tier.tips),
            "\n",
        ]

        notes = self.category_notes(snapshot)
        if notes:
            parts += ["## Category-Specific Recommendations\n\n", _bullets(notes), "\n"]

        potential = self.calculate_savings_potential(snapshot)
        if potential > 0:
            parts += [
                "## Savings Potential\n\n",
                f"Based on the analysis, you could potentially save an additional {self._cur(potential)} "
                "per month by optimizing your spending patterns.\n\n",
            ]

        income = snapshot.income_amount
        parts += [
            "## Recommended Budget Allocation\n\n",
            f"For your monthly income of {self._cur(income)}, consider the following allocation:\n\n",
        ]
        parts += [
            f"- {label}: {self._cur(round_half_up(income * share))} ({plain_percent(share)}%)\n"
            for label, share in BUDGET_SPLIT
        ]
        return "".join(parts)

    @_requires_snapshot(NO_INVESTMENT_DATA_MESSAGE)
    def generate_investment_advice(self, snapshot: FinancialSnapshot) -> str:
        income = snapshot.income_amount
        ratio = snapshot.spending_ratio
        income_level = self.classify_income(income)
        bucket = self.classify_spending_bucket(ratio)
        logger.debug(f"Investment profile: income level {income_level}, {bucket}")

        suggestions = self.config.investment_suggestions[income_level][bucket]
        recommended = self.calculate_recommended_investment(income, ratio)
        allocation = self.config.asset_allocations[bucket]

        def share(pct: int) -> str:
            return f"{self._cur(round_half_up(recommended * pct / 100))} ({pct}%)"

        return "".join([
            "## Investment Recommendations\n\n",
            f"Based on your monthly income of {self._cur(income)} and spending ratio of {percent(ratio)}%, "
            f"you should aim to invest approximately {self._cur(recommended)} monthly.\n\n",
            "### Recommended Investment Strategy\n\n",
            _bullets(suggestions),
            "\n### Suggested Asset Allocation\n\n",
            f"- Equity: {share(allocation.equity)}\n",
            f"- Debt: {share(allocation.debt)}\n",
            f"- Liquid/Emergency Fund: {share(allocation.liquid)}\n",
            "\n### Tax Saving Recommendations\n\n",
            "- Section 80C (EPF, ELSS, etc.): Up to ₹1.5 lakh per annum\n",
            "- Section 80D (Health Insurance): Up to ₹25,000 per annum\n",
            "- Section 80G (Charitable Donations): Varies based on donation amount\n",
        ])

    @_requires_snapshot(NO_DATA_MESSAGE)
    def generate_savings_tips(self, snapshot: FinancialSnapshot) -> str:
        savings_ratio = snapshot.remaining_amount / snapshot.income_amount
        savings_rate = savings_ratio * 100

        parts = [
            "## Savings Recommendations\n\n",
            f"Your current savings rate is {percent(savings_ratio)}% of your income. ",
        ]
        if savings_rate < 10:
            parts.append("This is below the recommended minimum savings rate of 10-15%.\n\n")
        elif savings_rate < 20:
            parts.append(
                "This is a good start, but financial experts typically recommend saving at least "
                "20% of your income.\n\n"
            )
        else:
            parts.append("This is excellent and exceeds the typical recommendation of 20%!\n\n")

        parts.append("### Savings Opportunities\n\n")
        potential = self.calculate_savings_potential(snapshot)
        if potential > 0:
            parts.append(
                f"By optimizing your spending across categories, you could potentially save an additional "
                f"{self._cur(potential)} per month.\n\n"
            )

        parts.append("### Category-Specific Savings Tips\n\n")
        for category, category_potential in self.category_potentials(snapshot)[:3]:
            if category_potential <= 0:
                continue
            tips = self.config.tips_for(category.name)
            parts.append(
                f"**{category.name} ({self._cur(category.value)})**: "
                f"Potential savings of {self._cur(category_potential)}\n"
            )
            parts.append(_bullets(self._rng.sample(list(tips), min(2, len(tips)))))
            parts.append("\n")

        parts += [
            "### General Savings Strategies\n\n",
            "- Follow the 50/30/20 rule: 50% for needs, 30% for wants, and 20% for savings\n",
            "- Set up automatic transfers to savings accounts on payday\n",
            "- Use the 24-hour rule for non-essential purchases\n",
            "- Consider a no-spend challenge for one week each month\n",
            "- Track every expense using a budgeting app or spreadsheet\n",
        ]
        return "".join(parts)

    @_requires_snapshot(NO_DATA_MESSAGE)
    def generate_budget_plan(self, snapshot: FinancialSnapshot) -> str:
        income = snapshot.income_amount
        budget, savings = self.ideal_budget(snapshot)
        number = self.formatter.number
        symbol = self.formatter.symbol

        parts = [
            "## Personalized Budget Plan\n\n",
            f"Based on your monthly income of {self._cur(income)}, here's a recommended budget allocation:\n\n",
            f"| Category | Current ({symbol}) | Recommended ({symbol}) | % of Income |\n",
            "|----------|-------------|-----------------|-------------|\n",
        ]
        for category in snapshot.categories:
            recommended = budget[category.name]
            parts.append(
                f"| {category.name} | {number(category.value)} | {number(recommended)} "
                f"| {percent(recommended / income)}% |\n"
            )
        parts.append(f"| Savings | - | {number(savings)} | {percent(savings / income)}% |\n\n")

        parts += [
            "### Budget Implementation Tips\n\n",
            "1. **Use the envelope method**: Allocate cash or virtual funds to each category at the "
            "beginning of the month\n",
            "2. **Track expenses daily**: Use a budgeting app or spreadsheet to record all expenses\n",
            "3. **Review weekly**: Take 15 minutes each week to review your spending against your budget\n",
            "4. **Adjust as needed**: Your first budget is a starting point; refine it based on real "
            "spending patterns\n",
            "5. **Pay yourself first**: Transfer money to savings before spending on discretionary items\n",
        ]
        return "".join(parts)

    @_requires_snapshot(NO_DATA_MESSAGE)
    def generate_debt_management_advice(self, snapshot: FinancialSnapshot) -> str:
        # No debt data in the snapshot, so repayment capacity comes from the remaining balance
        monthly_payment = self._cur(round_half_up(snapshot.remaining_amount * DEBT_REPAYMENT_SHARE))

        return "".join([
            "## Debt Management Strategy\n\n",
            "Based on your financial data, here are recommendations for managing debt effectively:\n\n",
            "### Debt Repayment Strategies\n\n",
            "1. **Avalanche Method**: Pay minimum on all debts, then put extra money toward highest "
            "interest debt first\n",
            "2. **Snowball Method**: Pay minimum on all debts, then put extra money toward smallest debt first\n",
            "3. **Debt Consolidation**: Consider consolidating multiple high-interest debts into a single "
            "lower-interest loan\n\n",
            f"Based on your current financial situation, you could potentially allocate {monthly_payment} "
            "monthly to debt repayment.\n\n",
            "### Debt Repayment Timeline Estimates\n\n",
            f"With a monthly payment of {monthly_payment}:\n\n",
            "- ₹1,00,000 debt at 10% interest: ~12 months to repay\n",
            "- ₹3,00,000 debt at 10% interest: ~36 months to repay\n",
            "- ₹5,00,000 debt at 10% interest: ~60 months to repay\n\n",
            "### Tips to Reduce Interest Costs\n\n",
            "- Negotiate with creditors for lower interest rates\n",
            "- Transfer high-interest credit card balances to cards with 0% intro APR\n",
            "- Pay more than the minimum payment whenever possible\n",
            "- Avoid taking on new debt while paying down existing debt\n",
            "- Consider balance transfer offers for credit card debt\n\n",
            "### Debt Prevention Strategies\n\n",
            "- Build an emergency fund of 3-6 months of expenses\n",
            "- Follow the 24-hour rule for non-essential purchases\n",
            "- Pay credit cards in full each month to avoid interest\n",
            "- Create and stick to a realistic budget\n",
            "- Increase your income through side hustles or career advancement\n",
        ])

    @_requires_snapshot(NO_DATA_MESSAGE)
    def generate_emergency_fund_advice(self, snapshot: FinancialSnapshot) -> str:
        monthly_expenses = snapshot.expenses_amount
        min_fund = monthly_expenses * 3
        optimal_fund = monthly_expenses * 6
        contribution = round_half_up(snapshot.remaining_amount * EMERGENCY_FUND_SHARE)

        def time_to(goal: float) -> str:
            if contribution <= 0:
                return "not reachable without a positive monthly surplus"
            return f"{math.ceil(goal / contribution)} months"

        return "".join([
            "## Emergency Fund Strategy\n\n",
            "An emergency fund is essential for financial security. It provides a safety net for unexpected "
            "expenses like medical emergencies, car repairs, or job loss.\n\n",
            "### Recommended Emergency Fund Size\n\n",
            f"Based on your monthly expenses of {self._cur(monthly_expenses)}, your emergency fund should be:\n\n",
            f"- **Minimum goal**: {self._cur(min_fund)} (3 months of expenses)\n",
            f"- **Optimal goal**: {self._cur(optimal_fund)} (6 months of expenses)\n\n",
            "### Building Your Emergency Fund\n\n",
            f"With your current remaining monthly amount of {self._cur(snapshot.remaining_amount)}, "
            f"you could contribute {self._cur(contribution)} monthly to your emergency fund.\n\n",
            f"- Time to reach minimum goal (3 months of expenses): {time_to(min_fund)}\n",
            f"- Time to reach optimal goal (6 months of expenses): {time_to(optimal_fund)}\n\n",
            "### Where to Keep Your Emergency Fund\n\n",
            "Your emergency fund should be accessible but not too easy to spend:\n\n",
            "- **High-yield savings account**: Offers better interest rates than regular savings\n",
            "- **Fixed deposits with partial withdrawal**: Good balance of accessibility and returns\n",
            "- **Liquid funds**: Can provide slightly better returns with minimal risk\n\n",
            "### Tips to Build Your Fund Faster\n\n",
            "- Set up automatic transfers to your emergency fund account\n",
            "- Allocate any windfalls (tax refunds, bonuses, gifts) to your fund\n",
            "- Consider a temporary side income to accelerate your progress\n",
            "- Reduce discretionary spending temporarily to increase contributions\n",
            "- Start with a smaller goal (1 month of expenses) to build momentum\n",
        ])

    def retirement_projection(
        self,
        income: float,
        assumptions: Optional[RetirementAssumptions] = None,
    ) -> Dict[str, float]:
        """
        Project the retirement corpus for a monthly income.

        Expenses in retirement are a fixed share of today's income, inflated to
        the retirement date, and the corpus must fund them for the configured
        number of years at the post-retirement return.
        """
        a = assumptions or self.config.retirement
        years = a.years_to_retirement

        monthly_expenses = income * a.expense_ratio
        future_annual_expenses = monthly_expenses * 12 * (1 + a.inflation_rate) ** years
        corpus = future_annual_expenses * (
            (1 - (1 + a.post_retirement_return) ** -a.years_in_retirement) / a.post_retirement_return
        )
        monthly_investment = corpus / (1 + a.pre_retirement_return) ** years / (years * 12)

        return {
            "monthly_expenses": monthly_expenses,
            "future_monthly_expenses": future_annual_expenses / 12,
            "corpus": corpus,
            "monthly_investment": monthly_investment,
        }

    def retirement_portfolio(self, years_to_retirement: int) -> Tuple[str, str, str]:
        for min_years, allocation in self.config.retirement_portfolios:
            if years_to_retirement > min_years:
                return allocation
        return self.config.retirement_portfolios[-1][1]

    @_requires_snapshot(NO_DATA_MESSAGE)
    def generate_retirement_advice(
        self,
        snapshot: FinancialSnapshot,
        assumptions: Optional[RetirementAssumptions] = None,
    ) -> str:
        a = assumptions or self.config.retirement
        income = snapshot.income_amount
        years = a.years_to_retirement
        projection = self.retirement_projection(income, a)

        equity, debt, gold = self.retirement_portfolio(years)

        return "".join([
            "## Retirement Planning Strategy\n\n",
            "Planning for retirement is one of the most important financial goals. Here's a personalized "
            "retirement plan based on your current income.\n\n",
            "### Retirement Corpus Required\n\n",
            f"Assuming you retire at age {a.retirement_age} and live until {a.life_expectancy}:\n\n",
            f"- Current monthly income: {self._cur(income)}\n",
            f"- Estimated monthly expenses in retirement: {self._cur(projection['monthly_expenses'])} "
            f"({plain_percent(a.expense_ratio)}% of current income)\n",
            f"- Inflation-adjusted monthly expenses at retirement: "
            f"{self._cur(round_half_up(projection['future_monthly_expenses']))}\n",
            f"- **Target retirement corpus**: {self._cur(round_half_up(projection['corpus']))}\n\n",
            "### Required Monthly Investment\n\n",
            f"To build your retirement corpus over the next {years} years, you need to invest approximately "
            f"{self._cur(round_half_up(projection['monthly_investment']))} monthly, assuming an average "
            f"annual return of {plain_percent(a.pre_retirement_return)}%.\n\n",
            "### Recommended Retirement Portfolio Allocation\n\n",
            f"Based on a {years}-year time horizon:\n\n",
            f"- Equity funds: {equity}\n",
            f"- Debt instruments: {debt}\n",
            f"- Gold/Alternative investments: {gold}\n",
            "\n### Recommended Retirement Investment Vehicles\n\n",
            "1. **National Pension System (NPS)**: Tax-efficient retirement vehicle with equity exposure\n",
            "2. **Equity Linked Savings Scheme (ELSS)**: Tax-saving mutual funds with high growth potential\n",
            "3. **Public Provident Fund (PPF)**: Government-backed savings scheme with tax benefits\n",
            "4. **Mutual Fund SIPs**: Systematic investment for long-term wealth building\n",
            "5. **Corporate Fixed Deposits**: Higher interest rates than regular bank deposits\n",
        ])

    def generate_category_specific_advice(
        self,
        category: Union[CategorySpend, Mapping[str, Any]],
        snapshot: SnapshotLike,
    ) -> str:
        data = coerce_snapshot(snapshot)
        if data is None or category is None:
            return NO_DATA_MESSAGE
        if not isinstance(category, CategorySpend):
            category = CategorySpend.model_validate(category)

        income = data.income_amount
        name = category.name
        lower = name.lower()
        ratio = category.value / income
        guideline = self.config.guideline_for(name)
        ideal_pct = percent(guideline.ideal, digits=0)
        high_pct = percent(guideline.high, digits=0)
        ideal_amount = self._cur(round_half_up(income * guideline.ideal))
        high_amount = self._cur(round_half_up(income * guideline.high))

        parts = [
            f"## {name} Spending Analysis\n\n",
            f"Your current {lower} spending is {self._cur(category.value)} per month, "
            f"which is {percent(ratio)}% of your income.\n\n",
        ]

        if ratio > guideline.high:
            parts.append(
                f"**This is significantly higher than recommended.** Financial experts suggest keeping {lower} "
                f"expenses to {ideal_pct}-{high_pct}% of your income ({ideal_amount}-{high_amount}).\n\n"
            )
        elif ratio > guideline.ideal:
            parts.append(
                f"**This is slightly higher than ideal.** Financial experts suggest keeping {lower} expenses "
                f"to around {ideal_pct}% of your income ({ideal_amount}).\n\n"
            )
        else:
            parts.append(
                f"**This is within the recommended range.** Financial experts suggest keeping {lower} expenses "
                f"to {ideal_pct}-{high_pct}% of your income, and you're doing well at {percent(ratio)}%.\n\n"
            )

        parts.append(f"### Tips to Optimize {name} Spending\n\n")
        parts.append(_bullets(self.config.tips_for(name)))

        if self.config.is_known_category(name):
            parts += [
                "\n### Benchmarking Information\n\n",
                f"The average Indian household spends approximately {ideal_pct}-{high_pct}% "
                f"of their income on {lower}.\n",
            ]
            benchmark = self.config.benchmarks.get(name)
            if benchmark:
                parts.append(f"{benchmark}\n")

        return "".join(parts)

    def category_advice_by_name(self, name: str, snapshot: SnapshotLike) -> Optional[str]:
        """Advice for the snapshot category whose name matches ``name`` case-insensitively."""
        data = coerce_snapshot(snapshot)
        if data is None:
            return NO_DATA_MESSAGE
        for category in data.categories:
            if category.name.lower() == name.lower():
                return self.generate_category_specific_advice(category, data)
        return None

    # ------------------------------------------------------------------
    # Free-text questions
    # ------------------------------------------------------------------

    def _default_answer(self, query: str, snapshot: FinancialSnapshot) -> str:
        savings_rate = snapshot.remaining_amount / snapshot.income_amount
        return "".join([
            "## Response to Your Query\n\n",
            f'I understand you\'re asking about: "{query}"\n\n',
            "Based on your financial situation:\n\n",
            f"- Monthly income: {self._cur(snapshot.income_amount)}\n",
            f"- Monthly expenses: {self._cur(snapshot.expenses_amount)}\n",
            f"- Remaining balance: {self._cur(snapshot.remaining_amount)}\n\n",
            f"Your current savings rate is {percent(savings_rate)}% of your income. ",
            "Financial experts typically recommend saving 20% of your income.\n\n",
            "For more specific advice, try asking about saving tips, investment recommendations, "
            "budgeting help, or specific spending categories.",
        ])

    def route_custom_query(self, query: Optional[str], snapshot: SnapshotLike) -> RoutedAnswer:
        data = coerce_snapshot(snapshot)
        if not query or not query.strip() or data is None:
            return RoutedAnswer(topic="missing_input", phrase=None, advice=NO_QUERY_MESSAGE)

        routes = build_routes(self, data)
        return route_query(query, routes, default=lambda: self._default_answer(query, data))

    def answer_custom_query(self, query: Optional[str], snapshot: SnapshotLike) -> str:
        return self.route_custom_query(query, snapshot).advice

