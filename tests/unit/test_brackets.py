"""Unit tests for progressive and flat tax rules"""

import pytest
from decimal import Decimal
from taxmate_gateway.domain.brackets import (
    PAYE_BRACKETS,
    PERSONAL_RELIEF,
    calculate_paye,
    flat_tax,
    progressive_tax,
)
from taxmate_gateway.domain.models import TaxBracket


@pytest.mark.parametrize(
    "income, expected",
    [
        (0, 0),
        (100000, 10000),
        (288000, 28800),  # first band boundary, no relief
        (300000, 31800),  # 28,800 + 12,000 @ 25%
        (388000, 53800),  # second band boundary, no relief
        (400000, 28600),  # 53,800 + 12,000 @ 30% - 28,800 relief
        (6000000, 1708600),  # third band boundary
        (10000000, 3018600),  # 400,000 into the top band
    ],
)
def test_paye_band_values(income, expected):
    """Test PAYE at and around each band boundary"""
    assert calculate_paye(Decimal(income)) == expected


def test_paye_negative_profit_is_zero():
    """Test losses produce no PAYE"""
    assert calculate_paye(Decimal("-50000")) == 0


def test_relief_only_applies_from_third_band():
    """Test relief is withheld until income passes the second band.

    Income settled in the first two bands keeps its full tax, so PAYE drops
    by the relief amount when income crosses 388,000.
    """
    at_boundary = calculate_paye(Decimal("388000"))
    just_over = calculate_paye(Decimal("388001"))

    assert at_boundary == Decimal("53800")
    assert just_over == Decimal("53800") + Decimal("0.30") - PERSONAL_RELIEF
    assert just_over < at_boundary


def test_progressive_tax_monotonic_within_relief_regions():
    """Test tax never decreases as income grows inside each relief region"""
    below = [Decimal(i) for i in range(0, 388001, 4000)]
    above = [Decimal(i) for i in range(388001, 12000001, 97000)]

    for region in (below, above):
        taxes = [calculate_paye(income) for income in region]
        assert taxes == sorted(taxes)


def test_progressive_tax_monotonic_with_uniform_relief():
    """Test a schedule with relief from the first bracket is monotonic everywhere"""
    incomes = [Decimal(i) for i in range(0, 12000001, 50000)]
    taxes = [progressive_tax(i, PAYE_BRACKETS, PERSONAL_RELIEF, relief_from_bracket=0) for i in incomes]

    assert taxes == sorted(taxes)
    assert all(t >= 0 for t in taxes)


def test_progressive_tax_generic_schedule():
    """Test calculator works for an arbitrary bracket schedule"""
    brackets = [
        TaxBracket(width=Decimal("1000"), rate=Decimal("0")),
        TaxBracket(width=None, rate=Decimal("0.5")),
    ]

    assert progressive_tax(Decimal("500"), brackets) == 0
    assert progressive_tax(Decimal("3000"), brackets) == 1000


def test_progressive_tax_relief_floors_at_zero():
    """Test relief larger than tax yields zero, not a negative liability"""
    brackets = [TaxBracket(width=None, rate=Decimal("0.10"))]

    assert progressive_tax(Decimal("1000"), brackets, Decimal("5000"), relief_from_bracket=0) == 0


def test_flat_tax():
    """Test flat rate with floor at zero"""
    assert flat_tax(Decimal("200000"), Decimal("0.30")) == 60000
    assert flat_tax(Decimal("-200000"), Decimal("0.30")) == 0
