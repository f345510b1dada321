"""Input checks run before any computation touches a record"""

from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Iterable, List

from taxmate_gateway.domain.exceptions import InvalidRecordError
from taxmate_gateway.domain.models import InvestmentSide, TransactionRecord, TransactionType


def _to_amount(record_id: object, field: str, value: object) -> Decimal:
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidRecordError(record_id, field, f"expected a number, got {type(value).__name__}")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidRecordError(record_id, field, "not a number") from e

    if not amount.is_finite():
        raise InvalidRecordError(record_id, field, "must be finite")
    return amount


def normalize_record(record: TransactionRecord) -> TransactionRecord:
    """
    Validate one record and return a copy with enum types and Decimal amounts.

    Raises:
        InvalidRecordError: naming the record and the offending field
    """
    try:
        txn_type = TransactionType(record.type)
    except ValueError as e:
        raise InvalidRecordError(record.id, "type", f"unknown type {record.type!r}") from e

    sub_type = record.sub_type
    if sub_type is not None:
        if txn_type is not TransactionType.INVESTMENT:
            raise InvalidRecordError(record.id, "sub_type", "only Investment records carry a sub type")
        try:
            sub_type = InvestmentSide(sub_type)
        except ValueError as e:
            raise InvalidRecordError(record.id, "sub_type", f"unknown sub type {sub_type!r}") from e

    if not isinstance(record.vendor, str) or not record.vendor.strip():
        raise InvalidRecordError(record.id, "vendor", "must be a non-empty string")

    total_amount = _to_amount(record.id, "total_amount", record.total_amount)
    if total_amount < 0:
        raise InvalidRecordError(record.id, "total_amount", "must not be negative")
    vat_amount = _to_amount(record.id, "vat_amount", record.vat_amount)

    return replace(
        record,
        type=txn_type,
        sub_type=sub_type,
        total_amount=total_amount,
        vat_amount=vat_amount,
    )


def normalize_records(records: Iterable[TransactionRecord]) -> List[TransactionRecord]:
    """Normalize a collection, preserving order and rejecting duplicate ids"""
    seen = set()
    normalized = []
    for record in records:
        if record.id in seen:
            raise InvalidRecordError(record.id, "id", "duplicate id in collection")
        seen.add(record.id)
        normalized.append(normalize_record(record))
    return normalized
