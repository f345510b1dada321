"""Tax snapshot endpoints - full engine run plus partial results"""

import time
from fastapi import APIRouter, Depends, Query, Request

from taxmate_gateway.api.v1.schemas import (
    CapitalGainsResponse,
    ComputeRequest,
    RiskFlagSchema,
    RiskResponse,
    SnapshotResponse,
)
from taxmate_gateway.api.dependencies import get_profile_repository, get_record_repository, get_request_id
from taxmate_gateway.infrastructure.database.repositories import ProfileRepository, RecordRepository
from taxmate_gateway.domain.models import BusinessType, ComputedSnapshot, RiskFlag
from taxmate_gateway.domain.engine import compute_snapshot, headline_liability
from taxmate_gateway.domain.capital_gains import match_capital_gains
from taxmate_gateway.domain.scoring import determine_risk_band
from taxmate_gateway.infrastructure.observability.metrics import record_snapshot
from taxmate_gateway.infrastructure.observability.logging import log_snapshot

router = APIRouter()


def _flag_schemas(flags: tuple[RiskFlag, ...]) -> list[RiskFlagSchema]:
    return [
        RiskFlagSchema(id=f.id, message=f.message, severity=f.severity.value, fix=f.fix, weight=f.weight)
        for f in flags
    ]


def build_snapshot_response(snapshot: ComputedSnapshot, business_type: BusinessType) -> SnapshotResponse:
    return SnapshotResponse(
        business_type=business_type,
        income_total=snapshot.income_total,
        expense_total=snapshot.expense_total,
        net_profit=snapshot.net_profit,
        vat_in=snapshot.vat_in,
        vat_out=snapshot.vat_out,
        vat_payable=snapshot.vat_payable,
        investment_total=snapshot.investment_total,
        realized_gains=snapshot.realized_gains,
        estimated_cgt=snapshot.estimated_cgt,
        estimated_paye=snapshot.estimated_paye,
        estimated_corp_tax=snapshot.estimated_corp_tax,
        headline_tax=headline_liability(snapshot, business_type),
        category_breakdown={c.value: amount for c, amount in snapshot.category_breakdown.items()},
        risk_flags=_flag_schemas(snapshot.risk_flags),
        risk_score=snapshot.risk_score,
        risk_band=determine_risk_band(snapshot.risk_score),
    )


@router.get("/snapshot", response_model=SnapshotResponse)
def get_snapshot(
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    records: RecordRepository = Depends(get_record_repository),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    """
    Recompute the tax snapshot from the user's stored records.

    Flow:
    1. Load records in creation order and the business profile
    2. Run the engine (aggregation, PAYE, corporate tax, CGT, risk)
    3. Record metrics and a structured log line
    """
    start_time = time.time()
    stored = records.list_records(user_id)
    business_type = profiles.get_profile(user_id).business_type

    snapshot = compute_snapshot(stored, business_type)

    duration_ms = (time.time() - start_time) * 1000
    log_snapshot(
        get_request_id(request),
        user_id,
        business_type.value,
        len(stored),
        snapshot.risk_score,
        [f.id for f in snapshot.risk_flags],
        duration_ms,
    )
    return build_snapshot_response(snapshot, business_type)


@router.post("/snapshot/compute", response_model=SnapshotResponse)
def compute_ad_hoc_snapshot(request_body: ComputeRequest):
    """Stateless engine run over records supplied in the body; nothing is stored"""
    snapshot = compute_snapshot([r.to_domain() for r in request_body.records], request_body.business_type)
    record_snapshot(snapshot, request_body.business_type.value, determine_risk_band(snapshot.risk_score))
    return build_snapshot_response(snapshot, request_body.business_type)


@router.get("/capital-gains", response_model=CapitalGainsResponse)
def get_capital_gains(
    user_id: str = Query(..., description="User identifier"),
    records: RecordRepository = Depends(get_record_repository),
):
    gains = match_capital_gains(records.list_records(user_id))
    return CapitalGainsResponse(
        realized_gains=gains.realized_gains,
        estimated_cgt=gains.estimated_cgt,
        matched_pairs=gains.matched_pairs,
        unmatched_buys=gains.unmatched_buys,
        unmatched_sells=gains.unmatched_sells,
    )


@router.get("/risk", response_model=RiskResponse)
def get_risk(
    user_id: str = Query(..., description="User identifier"),
    records: RecordRepository = Depends(get_record_repository),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    snapshot = compute_snapshot(records.list_records(user_id), profiles.get_profile(user_id).business_type)
    return RiskResponse(
        risk_flags=_flag_schemas(snapshot.risk_flags),
        risk_score=snapshot.risk_score,
        risk_band=determine_risk_band(snapshot.risk_score),
    )
