"""Draft tax returns built from a computed snapshot"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Tuple

from taxmate_gateway.domain.capital_gains import match_capital_gains
from taxmate_gateway.domain.exceptions import NoRealizedGainsError, NoRecordsError
from taxmate_gateway.domain.models import ComputedSnapshot, TransactionRecord, TransactionType
from taxmate_gateway.domain.validation import normalize_records
from taxmate_gateway.utils.date_utils import current_tax_year


class ReturnType(str, Enum):
    VAT = "VAT"
    PAYE = "PAYE"
    CORPORATE_TAX = "CorporateTax"


@dataclass(frozen=True)
class ReturnDraft:
    """Unfiled return, ready for the filing service"""

    return_type: ReturnType
    period: int
    amount: Decimal
    records: Tuple[TransactionRecord, ...]

    @property
    def record_count(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class ScheduleCG:
    """Capital-gains schedule summary"""

    realized_gains: Decimal
    estimated_cgt: Decimal
    investments: Tuple[TransactionRecord, ...]


def prepare_return(
    snapshot: ComputedSnapshot,
    records: Iterable[TransactionRecord],
    return_type: ReturnType,
    period: Optional[int] = None,
) -> ReturnDraft:
    """
    Select the liability for a return type and bundle the supporting records.

    VAT files vat_payable (negative means a refund claim), PAYE files
    estimated_paye, CorporateTax files estimated_corp_tax.

    Raises:
        NoRecordsError: nothing to file
    """
    normalized = tuple(normalize_records(records))
    if not normalized:
        raise NoRecordsError("No data available for filing. Upload records first.")

    return_type = ReturnType(return_type)
    if return_type == ReturnType.VAT:
        amount = snapshot.vat_payable
    elif return_type == ReturnType.PAYE:
        amount = snapshot.estimated_paye
    else:
        amount = snapshot.estimated_corp_tax

    return ReturnDraft(
        return_type=return_type,
        period=period if period is not None else current_tax_year(),
        amount=amount,
        records=normalized,
    )


def schedule_cg(records: Iterable[TransactionRecord]) -> ScheduleCG:
    """
    Summarize realized gains and the investment records behind them.

    Raises:
        NoRealizedGainsError: realized gains are zero or a loss
    """
    normalized = normalize_records(records)
    gains = match_capital_gains(normalized)
    if gains.realized_gains <= 0:
        raise NoRealizedGainsError("No realized gains to report yet.")

    return ScheduleCG(
        realized_gains=gains.realized_gains,
        estimated_cgt=gains.estimated_cgt,
        investments=tuple(r for r in normalized if r.type == TransactionType.INVESTMENT),
    )
