"""CRUD for transaction records - every committed change is pushed to the change feed"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taxmate_gateway.api.v1.schemas import RecordCreate, RecordIn, RecordListResponse, RecordResponse
from taxmate_gateway.api.dependencies import get_record_repository, get_request_id
from taxmate_gateway.infrastructure.database.session import get_db
from taxmate_gateway.infrastructure.database.repositories import RecordRepository
from taxmate_gateway.domain.validation import normalize_record

router = APIRouter()


@router.post("/records", response_model=RecordResponse, status_code=201)
def create_record(
    request_body: RecordCreate,
    request: Request,
    db: Session = Depends(get_db),
    records: RecordRepository = Depends(get_record_repository),
):
    """
    Store a reviewed transaction record.

    Malformed records are rejected with 422 (raised as InvalidRecordError)
    rather than stored with coerced values.
    """
    record = normalize_record(request_body.to_domain())

    try:
        stored = records.add_record(request_body.user_id, record)
        db.commit()
    except IntegrityError:
        db.rollback()
        logging.warning(
            f"Duplicate record id {record.id!r}",
            extra={"request_id": get_request_id(request), "user_id": request_body.user_id},
        )
        raise HTTPException(status_code=409, detail=f"Record {record.id} already exists")

    records.publish_changes(request_body.user_id)
    return RecordResponse.from_domain(stored)


@router.get("/records", response_model=RecordListResponse)
def list_records(
    user_id: str = Query(..., description="User identifier"),
    year: int | None = Query(None, description="Restrict to one tax year"),
    records: RecordRepository = Depends(get_record_repository),
):
    """Records in creation order"""
    return RecordListResponse(
        user_id=user_id,
        records=[RecordResponse.from_domain(r) for r in records.list_records(user_id, year=year)],
    )


@router.put("/records/{record_id}", response_model=RecordResponse)
def update_record(
    record_id: str,
    request_body: RecordIn,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    records: RecordRepository = Depends(get_record_repository),
):
    if request_body.id != record_id:
        raise HTTPException(status_code=400, detail="Record ID in body does not match path")

    record = normalize_record(request_body.to_domain())
    updated = records.update_record(user_id, record)
    if updated is None:
        raise HTTPException(status_code=404, detail="Record not found")

    db.commit()
    records.publish_changes(user_id)
    return RecordResponse.from_domain(updated)


@router.delete("/records/{record_id}", status_code=204)
def delete_record(
    record_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    records: RecordRepository = Depends(get_record_repository),
):
    if not records.delete_record(user_id, record_id):
        raise HTTPException(status_code=404, detail="Record not found")

    db.commit()
    records.publish_changes(user_id)
    return Response(status_code=204)
