"""Unit tests for Postgres buyer repository using SQLite in-memory."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from buyer_leads.adapters.outbound.buyer.models import Base
from buyer_leads.adapters.outbound.buyer.postgres_buyer_repository import PostgresBuyerRepository
from buyer_leads.application.dtos.buyer import BuyerFilters
from buyer_leads.domain.entities.buyer_history import BuyerHistory
from buyer_leads.domain.entities.buyer_lead import BuyerLead
from buyer_leads.domain.enums import (
    BHK,
    City,
    PropertyType,
    Purpose,
    Source,
    Status,
    Timeline,
)
from buyer_leads.domain.errors import NotFoundError, PersistenceError

BASE_TIME = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


def _lead(lead_id, minutes=0, **overrides):
    values = {
        "id": lead_id,
        "owner_id": "agent-1",
        "full_name": f"Buyer {lead_id}",
        "phone": "9876543210",
        "city": City.MOHALI,
        "property_type": PropertyType.APARTMENT,
        "bhk": BHK.THREE,
        "purpose": Purpose.BUY,
        "timeline": Timeline.EXPLORING,
        "source": Source.WALK_IN,
        "created_at": BASE_TIME + timedelta(minutes=minutes),
        "updated_at": BASE_TIME + timedelta(minutes=minutes),
    }
    values.update(overrides)
    return BuyerLead(**values)


def _history(entry_id, buyer_id, minutes=0):
    return BuyerHistory(
        id=entry_id,
        buyer_id=buyer_id,
        changed_by="agent-1",
        changed_at=BASE_TIME + timedelta(minutes=minutes),
        diff={"action": "created", "fields": ["fullName", "phone"]},
    )


@pytest.fixture
def sqlite_engine():
    """Create SQLite in-memory engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def repository(sqlite_engine, monkeypatch):
    """Create Postgres repository with SQLite in-memory database for testing."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=sqlite_engine)

    def get_test_db_session():
        return SessionLocal()

    monkeypatch.setattr(
        "buyer_leads.adapters.outbound.buyer.postgres_buyer_repository.get_db_session",
        get_test_db_session,
    )

    return PostgresBuyerRepository()


@pytest.mark.asyncio
async def test_insert_and_find_round_trip(repository):
    """Test that inserting and finding a lead preserves every field."""
    lead = _lead("a", email="buyer@mail.com", tags=["vip", "loan"], budget_min=100, budget_max=200)

    await repository.insert(lead)
    found = await repository.find("a")

    assert found.full_name == "Buyer a"
    assert found.email == "buyer@mail.com"
    assert found.city == City.MOHALI
    assert found.bhk == BHK.THREE
    assert found.source == Source.WALK_IN
    assert found.tags == ["vip", "loan"]
    assert found.budget_max == 200
    assert found.status == Status.NEW
    assert found.created_at == BASE_TIME
    assert found.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_budget_round_trips_at_64_bit_limit(repository):
    """Test the largest accepted budget is stored without overflow."""
    await repository.insert(_lead("a", budget_min=1, budget_max=2**63 - 1))

    found = await repository.find("a")

    assert found.budget_max == 2**63 - 1


@pytest.mark.asyncio
async def test_find_missing_returns_none(repository):
    """Test finding an unknown id returns None."""
    assert await repository.find("missing") is None


@pytest.mark.asyncio
async def test_update_applies_patch(repository):
    """Test update changes fields and keeps created_at."""
    await repository.insert(_lead("a"))

    updated = await repository.update("a", {"status": Status.VISITED, "tags": ["hot"]})
    found = await repository.find("a")

    assert updated.status == Status.VISITED
    assert found.status == Status.VISITED
    assert found.tags == ["hot"]
    assert found.created_at == BASE_TIME
    assert found.updated_at > BASE_TIME


@pytest.mark.asyncio
async def test_update_missing_lead_raises(repository):
    """Test updating an unknown lead raises NotFoundError."""
    with pytest.raises(NotFoundError):
        await repository.update("missing", {"notes": "x"})


@pytest.mark.asyncio
async def test_history_newest_first_with_limit(repository):
    """Test history ordering and limit."""
    await repository.insert(_lead("a"))
    for minute in range(6):
        await repository.append_history(_history(f"h{minute}", "a", minutes=minute))

    entries = await repository.list_history("a", limit=5)

    assert [entry.id for entry in entries] == ["h5", "h4", "h3", "h2", "h1"]
    assert entries[0].diff == {"action": "created", "fields": ["fullName", "phone"]}


@pytest.mark.asyncio
async def test_history_ties_on_changed_at_order_by_id(repository):
    """Test entries sharing a timestamp are ordered by id descending."""
    await repository.insert(_lead("a"))
    await repository.append_history(_history("h-a", "a"))
    await repository.append_history(_history("h-c", "a"))
    await repository.append_history(_history("h-b", "a"))

    entries = await repository.list_history("a")

    assert [entry.id for entry in entries] == ["h-c", "h-b", "h-a"]


@pytest.mark.asyncio
async def test_delete_cascades_history(repository):
    """Test deleting a lead also deletes its history entries."""
    await repository.insert(_lead("a"))
    await repository.append_history(_history("h1", "a"))
    await repository.append_history(_history("h2", "a", minutes=1))

    await repository.delete("a")

    assert await repository.find("a") is None
    assert await repository.list_history("a") == []


@pytest.mark.asyncio
async def test_search_filters_sorts_and_paginates(repository):
    """Test filters, case-insensitive search, ordering and pagination."""
    await repository.insert(_lead("a", minutes=0, full_name="Priya Singh"))
    await repository.insert(_lead("b", minutes=1, city=City.ZIRAKPUR))
    await repository.insert(_lead("c", minutes=2))
    await repository.insert(_lead("d", minutes=3))

    page, total = await repository.search(BuyerFilters(city=City.MOHALI), offset=1, limit=2)
    assert total == 3
    assert [lead.id for lead in page] == ["c", "a"]

    by_name, total = await repository.search(BuyerFilters(search="PRIYA"))
    assert total == 1
    assert by_name[0].id == "a"

    by_name_asc, _ = await repository.search(BuyerFilters(sort="fullName", order="asc"))
    assert by_name_asc[0].full_name == "Buyer b"


@pytest.mark.asyncio
async def test_insert_failure_raises_persistence_error(repository):
    """Test database errors surface as PersistenceError."""
    with pytest.raises(PersistenceError):
        await repository.insert(_lead("a", full_name=None))

    assert await repository.find("a") is None


@pytest.mark.asyncio
async def test_run_atomic_commits_on_success(repository):
    """Test writes inside a successful atomic unit are committed together."""

    async def work(store):
        await store.insert(_lead("a"))
        await store.append_history(_history("h1", "a"))
        return 1

    assert await repository.run_atomic(work) == 1
    assert await repository.find("a") is not None
    assert len(await repository.list_history("a")) == 1


@pytest.mark.asyncio
async def test_run_atomic_rolls_back_on_database_error(repository):
    """Test a failing statement rolls back every earlier write in the unit."""

    async def work(store):
        await store.insert(_lead("a"))
        await store.append_history(_history("h1", "a"))
        await store.insert(_lead("b", full_name=None))

    with pytest.raises(PersistenceError):
        await repository.run_atomic(work)

    assert await repository.find("a") is None
    assert await repository.list_history("a") == []


@pytest.mark.asyncio
async def test_run_atomic_rolls_back_on_domain_error(repository):
    """Test non-database errors also roll back and propagate unchanged."""

    async def work(store):
        await store.insert(_lead("a"))
        await store.update("missing", {"notes": "x"})

    with pytest.raises(NotFoundError):
        await repository.run_atomic(work)

    assert await repository.find("a") is None
