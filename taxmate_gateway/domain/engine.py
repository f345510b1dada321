"""Tax engine - composes aggregation, tax rules, capital gains and risk into one snapshot"""

from dataclasses import replace
from decimal import Decimal
from typing import Iterable

from taxmate_gateway.domain.aggregation import aggregate_transactions
from taxmate_gateway.domain.brackets import CORPORATE_TAX_RATE, calculate_paye, flat_tax
from taxmate_gateway.domain.capital_gains import match_capital_gains
from taxmate_gateway.domain.models import BusinessType, ComputedSnapshot, TransactionRecord
from taxmate_gateway.domain.scoring import score_risk
from taxmate_gateway.domain.validation import normalize_records


def compute_snapshot(records: Iterable[TransactionRecord], business_type: BusinessType) -> ComputedSnapshot:
    """
    Main entry point: derive every tax figure and the audit-risk signal.

    PAYE is always computed; corporate tax only for organizations. The
    caller decides which liability to surface (see headline_liability).

    Raises:
        InvalidRecordError: a record is malformed
        ValueError: business_type is not a BusinessType
    """
    business_type = BusinessType(business_type)
    normalized = normalize_records(records)

    totals = aggregate_transactions(normalized)
    gains = match_capital_gains(normalized)

    if business_type == BusinessType.ORGANIZATION:
        corp_tax = flat_tax(totals.net_profit, CORPORATE_TAX_RATE)
    else:
        corp_tax = Decimal("0")

    snapshot = ComputedSnapshot(
        income_total=totals.income_total,
        expense_total=totals.expense_total,
        net_profit=totals.net_profit,
        vat_in=totals.vat_in,
        vat_out=totals.vat_out,
        vat_payable=totals.vat_payable,
        investment_total=totals.investment_total,
        realized_gains=gains.realized_gains,
        estimated_cgt=gains.estimated_cgt,
        estimated_paye=calculate_paye(totals.net_profit),
        estimated_corp_tax=corp_tax,
        category_breakdown=totals.category_breakdown,
    )

    assessment = score_risk(snapshot, normalized)
    return replace(snapshot, risk_flags=assessment.risk_flags, risk_score=assessment.risk_score)


def headline_liability(snapshot: ComputedSnapshot, business_type: BusinessType) -> Decimal:
    """Income-tax figure shown to the taxpayer for their profile"""
    if BusinessType(business_type) == BusinessType.ORGANIZATION:
        return snapshot.estimated_corp_tax
    return snapshot.estimated_paye
