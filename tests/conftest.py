"""Pytest fixtures for testing"""

import itertools
import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from taxmate_gateway.api.main import create_app
from taxmate_gateway.api.dependencies import get_filing_client
from taxmate_gateway.infrastructure.database.models import Base
from taxmate_gateway.infrastructure.database.session import get_db
from taxmate_gateway.domain.models import InvestmentSide, TransactionRecord, TransactionType


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class StubFilingClient:
    """Records drafts instead of calling the filing service"""

    def __init__(self):
        self.submitted = []

    async def submit_return(self, draft):
        self.submitted.append(draft)
        return {"reference": f"MOCK-{len(self.submitted)}"}


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def filing_client() -> StubFilingClient:
    return StubFilingClient()


@pytest.fixture
def client(db: Session, filing_client: StubFilingClient) -> TestClient:
    """Create FastAPI test client with test database and stubbed filing"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_filing_client] = lambda: filing_client
    return TestClient(app)


@pytest.fixture
def make_record():
    """Factory for records with sequential ids"""
    ids = itertools.count(1)

    def _make(
        type: TransactionType,
        total_amount,
        vat_amount=0,
        vendor: str = "Vendor",
        sub_type: InvestmentSide | None = None,
        on: date | None = None,
    ) -> TransactionRecord:
        extra = {"date": on} if on is not None else {}
        return TransactionRecord(
            id=f"rec_{next(ids)}",
            type=type,
            vendor=vendor,
            total_amount=Decimal(str(total_amount)),
            vat_amount=Decimal(str(vat_amount)),
            sub_type=sub_type,
            **extra,
        )

    return _make


@pytest.fixture
def sample_records(make_record) -> list[TransactionRecord]:
    """Small business month: VAT-registered sales, mixed expenses, one paired trade"""
    return [
        make_record(TransactionType.INCOME, 100000, 16000, vendor="Client A"),
        make_record(TransactionType.INCOME, 50000, 8000, vendor="Client B"),
        make_record(TransactionType.EXPENSE, 3000, 480, vendor="Shell Fuel Station"),
        make_record(TransactionType.EXPENSE, 2500, 400, vendor="Stationery Mart"),
        make_record(TransactionType.EXPENSE, 12000, 1920, vendor="Laptop Store"),
        make_record(TransactionType.INVESTMENT, 20000, vendor="BTC Exchange", sub_type=InvestmentSide.BUY),
        make_record(TransactionType.INVESTMENT, 26000, vendor="BTC Exchange", sub_type=InvestmentSide.SELL),
    ]
