"""Data access layer for records and business profiles"""

import time
from decimal import Decimal
from typing import Callable, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from taxmate_gateway.infrastructure.database.models import TaxProfile, TaxRecord
from taxmate_gateway.infrastructure.database.change_feed import ChangeListener, RecordChangeFeed, RecordsChanged
from taxmate_gateway.domain.models import (
    BusinessProfile,
    BusinessType,
    InvestmentSide,
    TransactionRecord,
    TransactionType,
)
from taxmate_gateway.utils.date_utils import tax_year_bounds


def _to_domain(row: TaxRecord) -> TransactionRecord:
    return TransactionRecord(
        id=row.record_id,
        type=TransactionType(row.type),
        sub_type=InvestmentSide(row.sub_type) if row.sub_type else None,
        vendor=row.vendor,
        date=row.date,
        total_amount=Decimal(row.total_amount),
        vat_amount=Decimal(row.vat_amount),
        timestamp=row.timestamp,
    )


class ProfileRepository:
    """Repository for business profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> BusinessProfile:
        """Stored profile, or the personal default"""
        row = self.db.get(TaxProfile, user_id)
        if row is None:
            return BusinessProfile(user_id=user_id)
        return BusinessProfile(user_id=user_id, business_type=BusinessType(row.business_type))

    def set_business_type(self, user_id: str, business_type: BusinessType) -> BusinessProfile:
        row = self.db.get(TaxProfile, user_id)
        if row is None:
            row = TaxProfile(user_id=user_id)
            self.db.add(row)
        row.business_type = BusinessType(business_type).value
        self.db.flush()
        return BusinessProfile(user_id=user_id, business_type=BusinessType(business_type))


class RecordRepository:
    """Repository for transaction records, in insertion order"""

    def __init__(self, db: Session, feed: Optional[RecordChangeFeed] = None):
        self.db = db
        self.feed = feed or RecordChangeFeed()

    def _query(self, user_id: str):
        return self.db.query(TaxRecord).filter(TaxRecord.user_id == user_id)

    def _next_timestamp(self, user_id: str) -> int:
        # Wall clock, bumped past the newest record so ordering stays strict
        last = self.db.query(func.max(TaxRecord.timestamp)).filter(TaxRecord.user_id == user_id).scalar()
        now = time.time_ns()
        return now if last is None or now > last else last + 1

    def add_record(self, user_id: str, record: TransactionRecord) -> TransactionRecord:
        """Persist a validated record and stamp it"""
        row = TaxRecord(
            record_id=record.id,
            user_id=user_id,
            type=TransactionType(record.type).value,
            sub_type=InvestmentSide(record.sub_type).value if record.sub_type else None,
            vendor=record.vendor,
            date=record.date,
            total_amount=record.total_amount,
            vat_amount=record.vat_amount,
            timestamp=self._next_timestamp(user_id),
        )
        self.db.add(row)
        self.db.flush()  # Surface unique violations before commit
        return _to_domain(row)

    def get_record(self, user_id: str, record_id: str) -> Optional[TransactionRecord]:
        row = self._query(user_id).filter(TaxRecord.record_id == record_id).first()
        return _to_domain(row) if row else None

    def update_record(self, user_id: str, record: TransactionRecord) -> Optional[TransactionRecord]:
        """Overwrite a stored record's fields; id and timestamp are kept"""
        row = self._query(user_id).filter(TaxRecord.record_id == record.id).first()
        if row is None:
            return None

        row.type = TransactionType(record.type).value
        row.sub_type = InvestmentSide(record.sub_type).value if record.sub_type else None
        row.vendor = record.vendor
        row.date = record.date
        row.total_amount = record.total_amount
        row.vat_amount = record.vat_amount
        self.db.flush()
        return _to_domain(row)

    def delete_record(self, user_id: str, record_id: str) -> bool:
        deleted = self._query(user_id).filter(TaxRecord.record_id == record_id).delete()
        return deleted > 0

    def list_records(self, user_id: str, year: Optional[int] = None) -> List[TransactionRecord]:
        """
        Records in the order they were created, optionally for one tax year.

        Concurrent inserts can share a timestamp; record_id breaks the tie so
        the order, and with it capital-gains pairing, is the same on every read.
        """
        query = self._query(user_id)
        if year is not None:
            start, end = tax_year_bounds(year)
            query = query.filter(TaxRecord.date >= start, TaxRecord.date <= end)
        rows = query.order_by(TaxRecord.timestamp.asc(), TaxRecord.record_id.asc()).all()
        return [_to_domain(row) for row in rows]

    def subscribe(self, on_change: ChangeListener) -> Callable[[], None]:
        """Receive the full record set after every published change"""
        return self.feed.subscribe(on_change)

    def publish_changes(self, user_id: str) -> None:
        """Notify subscribers; call after the transaction commits"""
        profile = ProfileRepository(self.db).get_profile(user_id)
        self.feed.publish(
            RecordsChanged(
                user_id=user_id,
                records=tuple(self.list_records(user_id)),
                business_type=profile.business_type,
            )
        )
