"""
Keyword routing for free-text questions.

Routes are an explicit ordered list; the first route whose phrase occurs in the
lower-cased query answers it. Order is therefore priority: fixed topics first,
then one route per new snapshot category name, then the default answer. A
category whose name equals a fixed phrase replaces that fixed route in place.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Tuple

from app.models.snapshot import FinancialSnapshot

if TYPE_CHECKING:
    from app.advisory.engine import AdvisoryEngine

logger = logging.getLogger(__name__)

TOPIC_PHRASES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("savings", ("how can i save", "saving tips", "save money")),
    ("investment", ("how should i invest", "investment", "where to invest")),
    ("budget", ("budget", "create budget", "help with budget")),
    ("debt", ("debt", "loan", "credit")),
    ("emergency_fund", ("emergency fund", "rainy day fund")),
    ("retirement", ("retirement", "retire")),
)

DEFAULT_TOPIC = "default"
CATEGORY_TOPIC = "category"


@dataclass(frozen=True)
class QueryRoute:
    phrase: str
    topic: str
    handler: Callable[[], str]

    def matches(self, normalized_query: str) -> bool:
        return self.phrase in normalized_query


@dataclass(frozen=True)
class RoutedAnswer:
    topic: str
    phrase: Optional[str]
    advice: str


def build_routes(engine: "AdvisoryEngine", snapshot: FinancialSnapshot) -> List[QueryRoute]:
    topic_handlers = {
        "savings": lambda: engine.generate_savings_tips(snapshot),
        "investment": lambda: engine.generate_investment_advice(snapshot),
        "budget": lambda: engine.generate_budget_plan(snapshot),
        "debt": lambda: engine.generate_debt_management_advice(snapshot),
        "emergency_fund": lambda: engine.generate_emergency_fund_advice(snapshot),
        "retirement": lambda: engine.generate_retirement_advice(snapshot),
    }

    routes = {
        phrase: QueryRoute(phrase=phrase, topic=topic, handler=topic_handlers[topic])
        for topic, phrases in TOPIC_PHRASES
        for phrase in phrases
    }

    # A category named like a fixed phrase ("Loan", "Budget") takes over that
    # route at its original position; a repeated name replaces the earlier one.
    for category in snapshot.categories:
        phrase = category.name.lower()
        if not phrase:
            continue
        routes[phrase] = QueryRoute(
            phrase=phrase,
            topic=CATEGORY_TOPIC,
            handler=lambda category=category: engine.generate_category_specific_advice(category, snapshot),
        )

    return list(routes.values())


def route_query(query: str, routes: Sequence[QueryRoute], default: Callable[[], str]) -> RoutedAnswer:
    normalized = query.lower()
    for route in routes:
        if route.matches(normalized):
            logger.debug(f"Query routed to '{route.topic}' via phrase '{route.phrase}'")
            return RoutedAnswer(topic=route.topic, phrase=route.phrase, advice=route.handler())

    logger.debug("Query matched no route, using default answer")
    return RoutedAnswer(topic=DEFAULT_TOPIC, phrase=None, advice=default())
