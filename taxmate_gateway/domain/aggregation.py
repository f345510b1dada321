"""Sums by transaction type and expense sub-category"""

from decimal import Decimal
from typing import Dict, List

from taxmate_gateway.domain.models import (
    ExpenseCategory,
    InvestmentSide,
    TransactionRecord,
    TransactionTotals,
    TransactionType,
)

CAPITAL_PURCHASE_THRESHOLD = Decimal("10000")
OPERATING_KEYWORDS = ("fuel", "transport")


def classify_expense(record: TransactionRecord) -> ExpenseCategory:
    """
    Bucket an expense record.

    Precedence: amount above the capital threshold wins over vendor keywords.
    """
    if record.total_amount > CAPITAL_PURCHASE_THRESHOLD:
        return ExpenseCategory.CAPITAL_PURCHASE

    vendor = record.vendor.lower()
    if any(keyword in vendor for keyword in OPERATING_KEYWORDS):
        return ExpenseCategory.OPERATING_EXPENSE
    return ExpenseCategory.OTHER_EXPENSE


def _sum(values) -> Decimal:
    return sum(values, Decimal("0"))


def aggregate_transactions(records: List[TransactionRecord]) -> TransactionTotals:
    """
    Partition normalized records by type and compute totals.

    net_profit excludes capital gains; vat_payable is negative in a refund position.
    """
    income = [r for r in records if r.type == TransactionType.INCOME]
    expenses = [r for r in records if r.type == TransactionType.EXPENSE]
    investments = [
        r for r in records
        if r.type == TransactionType.INVESTMENT and r.sub_type in (InvestmentSide.BUY, InvestmentSide.SELL)
    ]

    income_total = _sum(r.total_amount for r in income)
    expense_total = _sum(r.total_amount for r in expenses)
    vat_out = _sum(r.vat_amount for r in income)
    vat_in = _sum(r.vat_amount for r in expenses)
    investment_total = _sum(r.total_amount for r in investments)

    breakdown: Dict[ExpenseCategory, Decimal] = {category: Decimal("0") for category in ExpenseCategory}
    breakdown[ExpenseCategory.INCOME] = income_total
    breakdown[ExpenseCategory.INVESTMENTS] = investment_total
    for record in expenses:
        breakdown[classify_expense(record)] += record.total_amount

    return TransactionTotals(
        income_total=income_total,
        expense_total=expense_total,
        net_profit=income_total - expense_total,
        vat_in=vat_in,
        vat_out=vat_out,
        vat_payable=vat_out - vat_in,
        investment_total=investment_total,
        category_breakdown=breakdown,
    )
