"""Return drafts - VAT, PAYE and corporate tax filing plus Schedule CG"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request

from taxmate_gateway.api.v1.schemas import RecordResponse, ReturnResponse, ScheduleCGResponse
from taxmate_gateway.api.dependencies import (
    get_filing_client,
    get_profile_repository,
    get_record_repository,
    get_request_id,
)
from taxmate_gateway.infrastructure.clients.filing import FilingClient
from taxmate_gateway.infrastructure.database.repositories import ProfileRepository, RecordRepository
from taxmate_gateway.infrastructure.observability.metrics import filing_counter
from taxmate_gateway.infrastructure.observability.logging import log_filing
from taxmate_gateway.domain.engine import compute_snapshot
from taxmate_gateway.domain.returns import ReturnType, prepare_return, schedule_cg

router = APIRouter()


@router.get("/returns/schedule-cg", response_model=ScheduleCGResponse)
def get_schedule_cg(
    user_id: str = Query(..., description="User identifier"),
    records: RecordRepository = Depends(get_record_repository),
):
    """Realized gains summary; 422 when there is nothing to report"""
    schedule = schedule_cg(records.list_records(user_id))
    return ScheduleCGResponse(
        realized_gains=schedule.realized_gains,
        estimated_cgt=schedule.estimated_cgt,
        investments=[RecordResponse.from_domain(r) for r in schedule.investments],
    )


@router.post("/returns/{return_type}", response_model=ReturnResponse, status_code=202)
def file_return(
    return_type: ReturnType,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    period: int | None = Query(None, description="Tax year; defaults to the current year"),
    records: RecordRepository = Depends(get_record_repository),
    profiles: ProfileRepository = Depends(get_profile_repository),
    filing_client: FilingClient = Depends(get_filing_client),
):
    """
    Draft a return from the current snapshot and queue it for filing.

    Flow:
    1. Load records (restricted to the period when one is given)
    2. Recompute the snapshot and pick the liability for the return type
    3. Submit to the filing service in the background
    """
    stored = records.list_records(user_id, year=period)
    snapshot = compute_snapshot(stored, profiles.get_profile(user_id).business_type)
    draft = prepare_return(snapshot, stored, return_type, period=period)

    background_tasks.add_task(filing_client.submit_return, draft)

    filing_counter.labels(return_type=draft.return_type.value).inc()
    log_filing(get_request_id(request), user_id, draft.return_type.value, float(draft.amount), draft.period)

    return ReturnResponse(
        return_type=draft.return_type.value,
        period=draft.period,
        amount=draft.amount,
        record_count=draft.record_count,
    )
