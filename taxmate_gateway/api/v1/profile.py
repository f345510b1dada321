"""GET/PUT /v1/profile - business type selecting PAYE vs corporate tax"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taxmate_gateway.api.v1.schemas import ProfileResponse, ProfileUpdate
from taxmate_gateway.api.dependencies import get_profile_repository, get_record_repository
from taxmate_gateway.infrastructure.database.session import get_db
from taxmate_gateway.infrastructure.database.repositories import ProfileRepository, RecordRepository

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    user_id: str = Query(..., description="User identifier"),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    """Stored profile; users without one are treated as personal taxpayers"""
    profile = profiles.get_profile(user_id)
    return ProfileResponse(user_id=profile.user_id, business_type=profile.business_type)


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    request_body: ProfileUpdate,
    db: Session = Depends(get_db),
    profiles: ProfileRepository = Depends(get_profile_repository),
    records: RecordRepository = Depends(get_record_repository),
):
    """Switching business type changes the inputs, so subscribers are notified"""
    profile = profiles.set_business_type(request_body.user_id, request_body.business_type)
    db.commit()
    records.publish_changes(request_body.user_id)
    return ProfileResponse(user_id=profile.user_id, business_type=profile.business_type)
