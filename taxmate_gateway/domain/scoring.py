"""Audit-risk scoring engine - heuristic red flags over a computed snapshot"""

from decimal import Decimal
from typing import Iterable, Iterator, List

from taxmate_gateway.domain.aggregation import CAPITAL_PURCHASE_THRESHOLD
from taxmate_gateway.domain.models import (
    ComputedSnapshot,
    InvestmentSide,
    RiskAssessment,
    RiskFlag,
    Severity,
    TransactionRecord,
    TransactionType,
)
from taxmate_gateway.domain.validation import normalize_records

MAX_RISK_SCORE = 100

NO_RECORDS = RiskFlag(
    id="no-records",
    message="No records uploaded: Triggers audit for non-filers or NIL returns.",
    severity=Severity.HIGH,
    fix="Upload at least 3-5 receipts to build a compliant history.",
    weight=40,
)
HIGH_EXPENSES = RiskFlag(
    id="high-expenses",
    message="Expenses exceed 150% of income: Common red flag for lifestyle mismatch.",
    severity=Severity.HIGH,
    fix="Verify business purpose of large expenses; categorize properly.",
    weight=30,
)
LOW_VAT = RiskFlag(
    id="low-vat",
    message="VAT on income below 14%: May indicate under-charging or misclassification.",
    severity=Severity.MEDIUM,
    fix="Ensure all sales include 16% VAT; review income records.",
    weight=20,
)
HIGH_CAPITAL = RiskFlag(
    id="high-capital",
    message="High capital purchases relative to income: Flags potential personal use.",
    severity=Severity.MEDIUM,
    fix="Document business use with quotes/invoices.",
    weight=15,
)
UNMATCHED_INVEST = RiskFlag(
    id="unmatched-invest",
    message="Unmatched investment sells: CGT calculation incomplete; data discrepancy risk.",
    severity=Severity.HIGH,
    fix="Upload buy receipts to pair trades.",
    weight=25,
)
HIGH_PAYE = RiskFlag(
    id="high-paye",
    message="High tax liability without evident deductions: Bracket creep audit trigger.",
    severity=Severity.LOW,
    fix="Track allowable deductions like pension/NSSF contributions.",
    weight=10,
)


def evaluate_rules(snapshot: ComputedSnapshot, records: List[TransactionRecord]) -> Iterator[RiskFlag]:
    """
    Yield triggered flags in canonical order.

    Thresholds:
    - expenses above 1.5x income
    - output VAT under 14% of income (statutory rate is 16%)
    - large purchases outnumbering half the income records
    - more sells than buys, so some disposals have no cost basis
    - net profit above 500,000 with either liability above 100,000
    """
    if not records:
        yield NO_RECORDS

    if snapshot.expense_total > snapshot.income_total * Decimal("1.5"):
        yield HIGH_EXPENSES

    # Ratio is undefined without income
    if snapshot.income_total > 0 and snapshot.vat_out / snapshot.income_total < Decimal("0.14"):
        yield LOW_VAT

    capital_purchases = sum(
        1 for r in records
        if r.type == TransactionType.EXPENSE and r.total_amount > CAPITAL_PURCHASE_THRESHOLD
    )
    income_count = sum(1 for r in records if r.type == TransactionType.INCOME)
    if capital_purchases > income_count * 0.5:
        yield HIGH_CAPITAL

    buys = sum(1 for r in records if r.type == TransactionType.INVESTMENT and r.sub_type == InvestmentSide.BUY)
    sells = sum(1 for r in records if r.type == TransactionType.INVESTMENT and r.sub_type == InvestmentSide.SELL)
    if sells > 0 and buys < sells:
        yield UNMATCHED_INVEST

    if snapshot.net_profit > 500_000 and (
        snapshot.estimated_paye > 100_000 or snapshot.estimated_corp_tax > 100_000
    ):
        yield HIGH_PAYE


def determine_risk_band(score: int) -> str:
    """
    Map risk score to an audit-likelihood band.

    - below 30: low
    - 30 to 70: medium
    - above 70: high
    """
    if score < 30:
        return "low"
    elif score <= 70:
        return "medium"
    else:
        return "high"


def score_risk(snapshot: ComputedSnapshot, records: Iterable[TransactionRecord]) -> RiskAssessment:
    """
    Main entry point: evaluate every rule and cap the weighted sum.

    Rules are independent; the score is additive and saturates at 100.
    """
    flags = tuple(evaluate_rules(snapshot, normalize_records(records)))
    score = min(MAX_RISK_SCORE, sum(flag.weight for flag in flags))

    return RiskAssessment(
        risk_flags=flags,
        risk_score=score,
        risk_band=determine_risk_band(score),
    )
