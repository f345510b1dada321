"""Integration tests for the record store and its change feed"""

import pytest
from dataclasses import replace
from datetime import date
from unittest.mock import MagicMock
from decimal import Decimal
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from taxmate_gateway.domain.models import BusinessType, InvestmentSide, TransactionType
from taxmate_gateway.infrastructure.database import session
from taxmate_gateway.infrastructure.database.change_feed import RecordChangeFeed
from taxmate_gateway.infrastructure.database.repositories import ProfileRepository, RecordRepository


@pytest.fixture
def feed() -> RecordChangeFeed:
    return RecordChangeFeed()


@pytest.fixture
def repo(db: Session, feed: RecordChangeFeed) -> RecordRepository:
    return RecordRepository(db, feed)


def test_records_listed_in_creation_order(repo: RecordRepository, make_record):
    """Test list order follows insertion with strictly increasing timestamps"""
    for record in [make_record(TransactionType.INCOME, 100) for _ in range(5)]:
        repo.add_record("u1", record)

    stored = repo.list_records("u1")

    assert [r.id for r in stored] == ["rec_1", "rec_2", "rec_3", "rec_4", "rec_5"]
    timestamps = [r.timestamp for r in stored]
    assert timestamps == sorted(timestamps)
    assert len(set(timestamps)) == 5


def test_records_are_scoped_per_user(repo: RecordRepository, make_record):
    repo.add_record("u1", make_record(TransactionType.INCOME, 100))
    repo.add_record("u2", make_record(TransactionType.INCOME, 200))

    assert [r.total_amount for r in repo.list_records("u2")] == [Decimal("200")]


def test_year_filter(repo: RecordRepository, make_record):
    repo.add_record("u1", make_record(TransactionType.INCOME, 100, on=date(2023, 12, 31)))
    repo.add_record("u1", make_record(TransactionType.INCOME, 100, on=date(2024, 1, 1)))
    repo.add_record("u1", make_record(TransactionType.INCOME, 100, on=date(2024, 12, 31)))

    assert [r.id for r in repo.list_records("u1", year=2024)] == ["rec_2", "rec_3"]


def test_update_keeps_timestamp(repo: RecordRepository, make_record):
    original = repo.add_record("u1", make_record(TransactionType.EXPENSE, 100))
    changed = replace(make_record(TransactionType.EXPENSE, 999, vendor="New Vendor"), id=original.id)

    updated = repo.update_record("u1", changed)

    assert updated.total_amount == 999
    assert updated.vendor == "New Vendor"
    assert updated.timestamp == original.timestamp
    assert repo.update_record("u1", make_record(TransactionType.EXPENSE, 1)) is None


def test_delete_record(repo: RecordRepository, make_record):
    stored = repo.add_record("u1", make_record(TransactionType.EXPENSE, 100))

    assert repo.delete_record("u1", stored.id) is True
    assert repo.get_record("u1", stored.id) is None
    assert repo.delete_record("u1", stored.id) is False


def test_subscribers_receive_full_record_set(repo: RecordRepository, make_record):
    """Test every publish delivers the user's records and profile"""
    events = []
    unsubscribe = repo.subscribe(events.append)

    repo.add_record("u1", make_record(TransactionType.INCOME, 100))
    repo.publish_changes("u1")
    repo.add_record("u1", make_record(TransactionType.EXPENSE, 40))
    repo.publish_changes("u1")

    assert [len(e.records) for e in events] == [1, 2]
    assert events[-1].business_type == BusinessType.PERSONAL

    unsubscribe()
    repo.publish_changes("u1")
    assert len(events) == 2


def test_failing_listener_does_not_block_others(repo: RecordRepository, make_record):
    def broken(event):
        raise RuntimeError("listener bug")

    received = []
    repo.subscribe(broken)
    repo.subscribe(received.append)

    repo.add_record("u1", make_record(TransactionType.INCOME, 100))
    repo.publish_changes("u1")

    assert len(received) == 1


def test_profile_defaults_to_personal(db: Session):
    profiles = ProfileRepository(db)

    assert profiles.get_profile("new_user").business_type == BusinessType.PERSONAL

    profiles.set_business_type("new_user", BusinessType.ORGANIZATION)
    assert profiles.get_profile("new_user").business_type == BusinessType.ORGANIZATION


def test_amounts_round_trip_exactly(db: Session, repo: RecordRepository, make_record):
    """Test stored amounts come back with every decimal place"""
    repo.add_record("u1", make_record(TransactionType.INCOME, "1000.004", "160.006"))
    db.commit()
    db.expire_all()

    stored = repo.list_records("u1")[0]

    assert stored.total_amount == Decimal("1000.004")
    assert stored.vat_amount == Decimal("160.006")


def test_timestamp_ties_ordered_by_record_id(repo: RecordRepository, make_record, monkeypatch):
    """Test records sharing a timestamp list in a stable order"""
    monkeypatch.setattr(repo, "_next_timestamp", lambda user_id: 42)
    buy = make_record(TransactionType.INVESTMENT, 100, sub_type=InvestmentSide.BUY)
    sell = make_record(TransactionType.INVESTMENT, 150, sub_type=InvestmentSide.SELL)

    repo.add_record("u1", replace(sell, id="b_sell"))
    repo.add_record("u1", replace(buy, id="a_buy"))

    assert [r.id for r in repo.list_records("u1")] == ["a_buy", "b_sell"]
    assert [r.id for r in repo.list_records("u1")] == ["a_buy", "b_sell"]


def test_get_db_rolls_back_failed_request(monkeypatch):
    """Test an error inside a request rolls the session back before closing"""
    fake_session = MagicMock()
    monkeypatch.setattr(session, "SessionLocal", lambda: fake_session)

    dependency = session.get_db()
    assert next(dependency) is fake_session

    with pytest.raises(OperationalError):
        dependency.throw(OperationalError("INSERT", {}, Exception("disk I/O error")))

    fake_session.rollback.assert_called_once()
    fake_session.close.assert_called_once()
