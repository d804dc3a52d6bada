"""Create buyer lead use case."""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from buyer_leads.application.ports.buyer_repository import BuyerRepository
from buyer_leads.application.ports.rate_limiter import RateLimiter
from buyer_leads.application.services.audit_recorder import AuditRecorder
from buyer_leads.application.validation.row_validator import require_valid_row
from buyer_leads.domain.entities.buyer_lead import BuyerLead
from buyer_leads.domain.enums import HistoryAction
from buyer_leads.domain.errors import RateLimitExceeded
from buyer_leads.domain.value_objects.actor_context import ActorContext
from buyer_leads.infrastructure.logging.logger import log_mutation, log_rate_limit_decision


class CreateBuyerUseCase:
    """Use case for creating a single buyer lead."""

    def __init__(
        self,
        repository: BuyerRepository,
        rate_limiter: RateLimiter,
        audit_recorder: AuditRecorder,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        """
        Initialize use case.

        Args:
            repository: Buyer repository
            rate_limiter: Limiter keyed by caller network origin
            audit_recorder: Recorder for the "created" entry
            clock: Source of createdAt/updatedAt timestamps
        """
        self._repository = repository
        self._rate_limiter = rate_limiter
        self._audit_recorder = audit_recorder
        self._clock = clock

    async def execute(
        self,
        actor: ActorContext,
        row: Any,
        origin: str,
        request_id: str = "create",
    ) -> BuyerLead:
        """
        Validate and persist one lead plus its "created" history entry.

        Args:
            actor: Acting identity; becomes the owner
            row: Raw row in the same shape consumed by import
            origin: Caller network origin used as the rate limit key
            request_id: Correlation id for logging

        Returns:
            The created lead

        Raises:
            RateLimitExceeded: If the origin has used up its quota
            ValidationError: If the row is invalid
            PersistenceError: If the store fails
        """
        allowed = await self._rate_limiter.allow(origin)
        log_rate_limit_decision(request_id, "create", origin, allowed)
        if not allowed:
            raise RateLimitExceeded(origin)

        draft = require_valid_row(row)
        lead = BuyerLead.from_draft(str(uuid4()), actor.actor_id, draft, self._clock())

        async def _persist(store: BuyerRepository) -> BuyerLead:
            lead_id = await store.insert(lead)
            await self._audit_recorder.record(
                store, HistoryAction.CREATED, actor, lead_id, draft.supplied_fields
            )
            return lead

        created = await self._repository.run_atomic(_persist)
        log_mutation(request_id, actor.actor_id, "created", buyer_id=created.id)
        return created
