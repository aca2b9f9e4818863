"""
advisory
~~~~~~~~

Rule-based financial advisory engine for the GetWise dashboard. The
AdvisoryEngine class classifies an income/expense snapshot against fixed
spending guidelines and renders Markdown advice, so the same rules serve the
HTTP API, scripts and tests alike.
"""

from .engine import AdvisoryEngine, coerce_snapshot
from .formatting import CurrencyFormatter
from .guidelines import AdvisoryConfig, CategoryGuideline, RetirementAssumptions, load_advisory_config
from .query_router import QueryRoute, RoutedAnswer

__all__ = [
    "AdvisoryConfig",
    "AdvisoryEngine",
    "CategoryGuideline",
    "CurrencyFormatter",
    "QueryRoute",
    "RetirementAssumptions",
    "RoutedAnswer",
    "coerce_snapshot",
    "load_advisory_config",
]
