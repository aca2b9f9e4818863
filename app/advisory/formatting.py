import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def percent(fraction: float, digits: int = 1) -> str:
    """
    Render a ratio as a percentage with a fixed number of decimals (0.8 -> '80.0').

    Ties round away from zero, taken on the exact binary value of
    ``fraction * 100``: 32100 / 40000 renders as '80.3', not the half-even '80.2'.
    """
    exponent = Decimal(1).scaleb(-digits)
    return str(Decimal(fraction * 100).quantize(exponent, rounding=ROUND_HALF_UP))


def plain_percent(fraction: float) -> str:
    """Render a guideline share without padding zeros (0.4 -> '40', 0.125 -> '12.5')."""
    return f"{round(fraction * 100, 6):g}"


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


@dataclass(frozen=True)
class CurrencyFormatter:
    """
    Formats amounts the way the dashboard shows them: a fixed currency glyph in
    front of a grouped number, no decimals for whole amounts and at most three
    fraction digits otherwise.
    """

    symbol: str = "₹"
    grouping: str = "western"

    def number(self, value: float) -> str:
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "-∞" if value < 0 else "∞"

        text = f"{abs(value):.3f}"
        whole, fraction = text.split(".")
        fraction = fraction.rstrip("0")

        if self.grouping == "indian":
            whole = _group_indian(whole)
        else:
            whole = f"{int(whole):,}"

        sign = "-" if value < 0 and (whole.strip("0,") or fraction) else ""
        return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"

    def currency(self, value: float) -> str:
        return f"{self.symbol}{self.number(value)}"
