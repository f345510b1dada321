"""SQLAlchemy ORM models for stored records and profiles"""

import uuid
from decimal import Decimal
from sqlalchemy import Column, Uuid, BigInteger, DateTime, Date, Text, UniqueConstraint
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class ExactDecimal(TypeDecorator):
    """Decimal stored as its string form so every digit survives the round trip"""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(Decimal(value))

    def process_result_value(self, value, dialect):
        return None if value is None else Decimal(value)


class TaxRecord(Base):
    """Stored transaction record"""

    __tablename__ = "tax_record"
    __table_args__ = (UniqueConstraint("user_id", "record_id", name="uq_tax_record_user_record"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    record_id = Column(Text, nullable=False)
    user_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)
    sub_type = Column(Text, nullable=True)
    vendor = Column(Text, nullable=False)
    date = Column(Date, nullable=False)
    total_amount = Column(ExactDecimal, nullable=False)
    vat_amount = Column(ExactDecimal, nullable=False, default=Decimal("0"))
    timestamp = Column(BigInteger, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TaxProfile(Base):
    """Business profile selecting personal vs corporate treatment"""

    __tablename__ = "tax_profile"

    user_id = Column(Text, primary_key=True)
    business_type = Column(Text, nullable=False, default="personal")
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
