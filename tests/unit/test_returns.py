"""Unit tests for return drafts and the capital-gains schedule"""

import pytest
from taxmate_gateway.domain.engine import compute_snapshot
from taxmate_gateway.domain.exceptions import NoRealizedGainsError, NoRecordsError
from taxmate_gateway.domain.models import BusinessType, InvestmentSide, TransactionType
from taxmate_gateway.domain.returns import ReturnType, prepare_return, schedule_cg
from taxmate_gateway.utils.date_utils import current_tax_year


@pytest.mark.parametrize(
    "return_type, business_type, expected",
    [
        (ReturnType.VAT, BusinessType.PERSONAL, 21200),
        (ReturnType.PAYE, BusinessType.PERSONAL, 13250),
        (ReturnType.CORPORATE_TAX, BusinessType.ORGANIZATION, 39750),
        (ReturnType.CORPORATE_TAX, BusinessType.PERSONAL, 0),
    ],
)
def test_prepare_return_selects_amount(sample_records, return_type, business_type, expected):
    """Test each return type files its own liability"""
    snapshot = compute_snapshot(sample_records, business_type)

    draft = prepare_return(snapshot, sample_records, return_type)

    assert draft.amount == expected
    assert draft.record_count == len(sample_records)
    assert draft.period == current_tax_year()


def test_prepare_return_accepts_plain_string_type(sample_records):
    snapshot = compute_snapshot(sample_records, BusinessType.PERSONAL)

    draft = prepare_return(snapshot, sample_records, "VAT", period=2024)

    assert draft.return_type is ReturnType.VAT
    assert draft.period == 2024


def test_prepare_return_refuses_empty_records():
    """Test nothing to file without records"""
    snapshot = compute_snapshot([], BusinessType.PERSONAL)

    with pytest.raises(NoRecordsError):
        prepare_return(snapshot, [], ReturnType.VAT)


def test_schedule_cg_lists_investments(sample_records):
    """Test schedule carries gains and only investment records"""
    schedule = schedule_cg(sample_records)

    assert schedule.realized_gains == 6000
    assert schedule.estimated_cgt == 900
    assert [r.sub_type for r in schedule.investments] == [InvestmentSide.BUY, InvestmentSide.SELL]


def test_schedule_cg_refuses_without_gains(make_record):
    """Test loss-only and empty collections have nothing to report"""
    losing = [
        make_record(TransactionType.INVESTMENT, 500, sub_type=InvestmentSide.BUY),
        make_record(TransactionType.INVESTMENT, 400, sub_type=InvestmentSide.SELL),
    ]

    with pytest.raises(NoRealizedGainsError):
        schedule_cg(losing)
    with pytest.raises(NoRealizedGainsError):
        schedule_cg([])
