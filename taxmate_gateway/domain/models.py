"""Domain models - pure Python dataclasses representing tax entities"""

from dataclasses import dataclass, field
from datetime import date as date_type
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Tuple


class TransactionType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"
    INVESTMENT = "Investment"


class InvestmentSide(str, Enum):
    BUY = "Buy"
    SELL = "Sell"


class BusinessType(str, Enum):
    PERSONAL = "personal"
    ORGANIZATION = "organization"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ExpenseCategory(str, Enum):
    """Dashboard buckets; every record lands in exactly one"""

    INCOME = "Income"
    CAPITAL_PURCHASE = "Capital Purchase"
    OPERATING_EXPENSE = "Operating Expense"
    OTHER_EXPENSE = "Other Expense"
    INVESTMENTS = "Investments"


@dataclass(frozen=True)
class TransactionRecord:
    """Single classified financial event"""

    id: str
    type: TransactionType
    vendor: str
    total_amount: Decimal
    vat_amount: Decimal = Decimal("0")
    sub_type: Optional[InvestmentSide] = None
    date: date_type = field(default_factory=date_type.today)
    timestamp: Optional[int] = None  # assigned by the record store


@dataclass(frozen=True)
class BusinessProfile:
    """Selects PAYE vs flat corporate-tax treatment"""

    user_id: str
    business_type: BusinessType = BusinessType.PERSONAL


@dataclass(frozen=True)
class TaxBracket:
    """Slice of a progressive schedule; width None means unbounded"""

    width: Optional[Decimal]
    rate: Decimal


@dataclass(frozen=True)
class RiskFlag:
    """Explanation attached to a triggered audit-risk rule"""

    id: str
    message: str
    severity: Severity
    fix: str
    weight: int


@dataclass(frozen=True)
class TransactionTotals:
    """Aggregated sums over a record collection"""

    income_total: Decimal
    expense_total: Decimal
    net_profit: Decimal
    vat_in: Decimal
    vat_out: Decimal
    vat_payable: Decimal
    investment_total: Decimal
    category_breakdown: Dict[ExpenseCategory, Decimal]


@dataclass(frozen=True)
class CapitalGainsResult:
    """Outcome of positional buy/sell pairing"""

    realized_gains: Decimal
    estimated_cgt: Decimal
    matched_pairs: int
    unmatched_buys: int
    unmatched_sells: int


@dataclass(frozen=True)
class RiskAssessment:
    """Triggered flags plus the capped weighted score"""

    risk_flags: Tuple[RiskFlag, ...]
    risk_score: int
    risk_band: str


@dataclass(frozen=True)
class ComputedSnapshot:
    """Everything the engine derives from one set of inputs"""

    income_total: Decimal
    expense_total: Decimal
    net_profit: Decimal
    vat_in: Decimal
    vat_out: Decimal
    vat_payable: Decimal
    investment_total: Decimal
    realized_gains: Decimal
    estimated_cgt: Decimal
    estimated_paye: Decimal
    estimated_corp_tax: Decimal
    category_breakdown: Dict[ExpenseCategory, Decimal]
    risk_flags: Tuple[RiskFlag, ...] = ()
    risk_score: int = 0
