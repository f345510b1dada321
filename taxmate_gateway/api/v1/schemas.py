"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date as date_type
from typing import Dict, List, Optional, Union

from taxmate_gateway.domain.models import BusinessType, TransactionRecord


class RecordIn(BaseModel):
    """Transaction record as submitted by a client"""

    id: str = Field(..., min_length=1, description="Record identifier, unique per user")
    type: str = Field(..., description="Income | Expense | Investment")
    sub_type: Optional[str] = Field(None, description="Buy | Sell, Investment records only")
    vendor: str = Field(..., description="Vendor or income source")
    date: Optional[date_type] = None
    total_amount: Union[int, float] = Field(..., description="Gross amount")
    vat_amount: Union[int, float] = 0

    def to_domain(self) -> TransactionRecord:
        # Contract checks are left to the engine so errors name the record
        extra = {"date": self.date} if self.date is not None else {}
        return TransactionRecord(
            id=self.id,
            type=self.type,
            sub_type=self.sub_type,
            vendor=self.vendor,
            total_amount=self.total_amount,
            vat_amount=self.vat_amount,
            **extra,
        )


class RecordCreate(RecordIn):
    """Request body for POST /v1/records"""

    user_id: str = Field(..., min_length=1, description="User identifier")


class RecordResponse(BaseModel):
    """Stored record"""

    id: str
    type: str
    sub_type: Optional[str] = None
    vendor: str
    date: date_type
    total_amount: float
    vat_amount: float
    timestamp: Optional[int] = None

    @classmethod
    def from_domain(cls, record: TransactionRecord) -> "RecordResponse":
        return cls(
            id=record.id,
            type=record.type.value,
            sub_type=record.sub_type.value if record.sub_type else None,
            vendor=record.vendor,
            date=record.date,
            total_amount=record.total_amount,
            vat_amount=record.vat_amount,
            timestamp=record.timestamp,
        )


class RecordListResponse(BaseModel):
    """Response for GET /v1/records"""

    user_id: str
    records: List[RecordResponse]


class ProfileUpdate(BaseModel):
    """Request body for PUT /v1/profile"""

    user_id: str = Field(..., min_length=1)
    business_type: BusinessType


class ProfileResponse(BaseModel):
    user_id: str
    business_type: BusinessType


class RiskFlagSchema(BaseModel):
    """Single triggered audit-risk rule"""

    id: str
    message: str
    severity: str
    fix: str
    weight: int


class SnapshotResponse(BaseModel):
    """Response for GET /v1/snapshot and POST /v1/snapshot/compute"""

    business_type: BusinessType
    income_total: float
    expense_total: float
    net_profit: float
    vat_in: float
    vat_out: float
    vat_payable: float
    investment_total: float
    realized_gains: float
    estimated_cgt: float
    estimated_paye: float
    estimated_corp_tax: float
    headline_tax: float
    category_breakdown: Dict[str, float]
    risk_flags: List[RiskFlagSchema]
    risk_score: int
    risk_band: str


class ComputeRequest(BaseModel):
    """Request body for POST /v1/snapshot/compute"""

    business_type: BusinessType = BusinessType.PERSONAL
    records: List[RecordIn] = Field(default_factory=list)


class CapitalGainsResponse(BaseModel):
    """Response for GET /v1/capital-gains"""

    realized_gains: float
    estimated_cgt: float
    matched_pairs: int
    unmatched_buys: int
    unmatched_sells: int


class RiskResponse(BaseModel):
    """Response for GET /v1/risk"""

    risk_flags: List[RiskFlagSchema]
    risk_score: int
    risk_band: str


class ReturnResponse(BaseModel):
    """Response for POST /v1/returns/{return_type}"""

    return_type: str
    period: int
    amount: float
    record_count: int
    status: str = "queued"


class ScheduleCGResponse(BaseModel):
    """Response for GET /v1/returns/schedule-cg"""

    realized_gains: float
    estimated_cgt: float
    investments: List[RecordResponse]
