"""Unit tests for single create use case."""

from datetime import datetime, timezone

import pytest

from buyer_leads.adapters.outbound.buyer import InMemoryBuyerRepository
from buyer_leads.adapters.outbound.rate_limit.in_memory_rate_limiter import InMemoryRateLimiter
from buyer_leads.application.dtos.buyer import BuyerFilters
from buyer_leads.application.services.audit_recorder import AuditRecorder
from buyer_leads.application.use_cases.create_buyer_use_case import CreateBuyerUseCase
from buyer_leads.domain.enums import BHK, Status
from buyer_leads.domain.errors import RateLimitExceeded, ValidationError
from buyer_leads.domain.value_objects.actor_context import ActorContext

FIXED_NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def _row(**overrides):
    row = {
        "fullName": "Aarav Sharma",
        "phone": "9876543210",
        "city": "Chandigarh",
        "propertyType": "Villa",
        "bhk": "4",
        "purpose": "Buy",
        "timeline": "ThreeToSixMonths",
        "source": "Referral",
        "tags": ["vip"],
    }
    row.update(overrides)
    return row


@pytest.fixture
def repository():
    """Create in-memory repository."""
    return InMemoryBuyerRepository()


@pytest.fixture
def use_case(repository):
    """Create use case allowing 2 creates per origin."""
    return CreateBuyerUseCase(
        repository,
        InMemoryRateLimiter(limit=2, window_seconds=60),
        AuditRecorder(clock=lambda: FIXED_NOW),
        clock=lambda: FIXED_NOW,
    )


@pytest.mark.asyncio
async def test_create_persists_lead_and_history(use_case, repository):
    """Test create stores the lead, owned by the actor, with a created entry."""
    lead = await use_case.execute(ActorContext("agent-1"), _row(), origin="10.0.0.1")

    stored = await repository.find(lead.id)
    assert stored.owner_id == "agent-1"
    assert stored.bhk == BHK.FOUR
    assert stored.status == Status.NEW
    assert stored.created_at == FIXED_NOW

    history = await repository.list_history(lead.id)
    assert len(history) == 1
    assert history[0].diff["action"] == "created"
    assert "bhk" in history[0].diff["fields"]


@pytest.mark.asyncio
async def test_create_honours_supplied_status(use_case):
    """Test a supplied status is kept."""
    lead = await use_case.execute(ActorContext("agent-1"), _row(status="Contacted"), origin="o")

    assert lead.status == Status.CONTACTED


@pytest.mark.asyncio
async def test_create_invalid_row_raises(use_case, repository):
    """Test invalid rows raise ValidationError and persist nothing."""
    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(ActorContext("agent-1"), _row(bhk=None), origin="10.0.0.1")

    assert [error.field for error in exc_info.value.errors] == ["bhk"]
    _, total = await repository.search(BuyerFilters())
    assert total == 0


@pytest.mark.asyncio
async def test_create_rate_limited_per_origin(use_case):
    """Test creates are limited per network origin, not per actor."""
    await use_case.execute(ActorContext("agent-1"), _row(), origin="10.0.0.1")
    await use_case.execute(ActorContext("agent-2"), _row(), origin="10.0.0.1")

    with pytest.raises(RateLimitExceeded):
        await use_case.execute(ActorContext("agent-3"), _row(), origin="10.0.0.1")

    lead = await use_case.execute(ActorContext("agent-1"), _row(), origin="10.0.0.2")
    assert lead.id
