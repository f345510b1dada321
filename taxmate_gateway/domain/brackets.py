"""Progressive and flat tax rules"""

from decimal import Decimal
from typing import Sequence

from taxmate_gateway.domain.models import TaxBracket

# Personal income bands, annual (KES)
PAYE_BRACKETS = (
    TaxBracket(width=Decimal("288000"), rate=Decimal("0.10")),
    TaxBracket(width=Decimal("100000"), rate=Decimal("0.25")),
    TaxBracket(width=Decimal("5612000"), rate=Decimal("0.30")),
    TaxBracket(width=Decimal("3600000"), rate=Decimal("0.325")),
    TaxBracket(width=None, rate=Decimal("0.35")),
)
PERSONAL_RELIEF = Decimal("28800")

CORPORATE_TAX_RATE = Decimal("0.30")

ZERO = Decimal("0")


def progressive_tax(
    annual_income: Decimal,
    brackets: Sequence[TaxBracket],
    personal_relief: Decimal = ZERO,
    relief_from_bracket: int = 2,
) -> Decimal:
    """
    Walk brackets in order, taxing each slice at its rate.

    Relief is only deducted when the walk settles in bracket index
    relief_from_bracket or later. Income settled in an earlier bracket
    returns its partial tax untouched, so PAYE drops by the relief amount
    just past 388,000.

    Example (PAYE bands):
        288,000 -> 28,800 (no relief)
        388,000 -> 53,800 (no relief)
        400,000 -> 53,800 + 3,600 - 28,800 = 28,600
    """
    if annual_income <= 0:
        return ZERO

    tax = ZERO
    remaining = annual_income
    for index, bracket in enumerate(brackets):
        if bracket.width is not None and remaining > bracket.width:
            tax += bracket.width * bracket.rate
            remaining -= bracket.width
            continue

        tax += remaining * bracket.rate
        if index < relief_from_bracket:
            return tax
        return max(ZERO, tax - personal_relief)

    # Schedule ran out of brackets; the leftover stays untaxed
    return max(ZERO, tax - personal_relief)


def calculate_paye(net_profit: Decimal) -> Decimal:
    """PAYE on net profit, with negative profit treated as zero income"""
    return progressive_tax(max(ZERO, net_profit), PAYE_BRACKETS, PERSONAL_RELIEF)


def flat_tax(amount: Decimal, rate: Decimal) -> Decimal:
    return max(ZERO, amount * rate)
