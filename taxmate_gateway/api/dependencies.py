"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from taxmate_gateway.infrastructure.clients.filing import FilingClient
from taxmate_gateway.infrastructure.database.change_feed import RecordChangeFeed
from taxmate_gateway.infrastructure.database.repositories import ProfileRepository, RecordRepository
from taxmate_gateway.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_change_feed(request: Request) -> RecordChangeFeed:
    """Change feed owned by the running application"""
    return request.app.state.change_feed


def get_record_repository(
    db: Session = Depends(get_db),
    feed: RecordChangeFeed = Depends(get_change_feed),
) -> RecordRepository:
    return RecordRepository(db, feed)


def get_profile_repository(db: Session = Depends(get_db)) -> ProfileRepository:
    return ProfileRepository(db)


def get_filing_client() -> FilingClient:
    """Provide filing service client instance"""
    return FilingClient()
