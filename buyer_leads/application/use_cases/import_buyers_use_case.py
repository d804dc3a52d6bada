"""Batch import use case."""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from buyer_leads.application.dtos.imports import ImportResult
from buyer_leads.application.ports.buyer_repository import BuyerRepository
from buyer_leads.application.ports.rate_limiter import RateLimiter
from buyer_leads.application.services.audit_recorder import AuditRecorder
from buyer_leads.application.validation.row_validator import validate_rows
from buyer_leads.domain.entities.buyer_lead import BuyerDraft, BuyerLead
from buyer_leads.domain.enums import HistoryAction
from buyer_leads.domain.errors import (
    BatchTooLargeError,
    BatchValidationError,
    PersistenceError,
    RateLimitExceeded,
)
from buyer_leads.domain.value_objects.actor_context import ActorContext
from buyer_leads.infrastructure.logging.logger import log_import_outcome, log_rate_limit_decision

DEFAULT_MAX_ROWS = 200


class ImportBuyersUseCase:
    """
    Validate a batch of raw rows and persist it all-or-nothing.

    A request moves Received -> Validating -> Rejected(size | rate | validation) or
    Persisting -> Committed | PersistenceFailed. Nothing is retried automatically.
    """

    def __init__(
        self,
        repository: BuyerRepository,
        rate_limiter: RateLimiter,
        audit_recorder: AuditRecorder,
        max_rows: int = DEFAULT_MAX_ROWS,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        """
        Initialize use case.

        Args:
            repository: Buyer repository providing the atomic unit
            rate_limiter: Limiter keyed by actor id
            audit_recorder: Recorder for the per-lead "created" entries
            max_rows: Batch size ceiling
            clock: Source of createdAt/updatedAt timestamps
        """
        self._repository = repository
        self._rate_limiter = rate_limiter
        self._audit_recorder = audit_recorder
        self._max_rows = max_rows
        self._clock = clock

    async def execute(
        self, actor: ActorContext, rows: list[Any], request_id: str = "import"
    ) -> ImportResult:
        """
        Import a batch of buyer rows.

        Args:
            actor: Acting identity; owns every imported lead
            rows: Raw rows in submission order
            request_id: Correlation id for logging

        Returns:
            Number of leads committed

        Raises:
            BatchTooLargeError: If the batch exceeds the row ceiling
            RateLimitExceeded: If the actor has used up its import quota
            BatchValidationError: If any row fails validation (nothing is persisted)
            PersistenceError: If the atomic unit fails (nothing is persisted)
        """
        row_count = len(rows)

        if row_count > self._max_rows:
            log_import_outcome(request_id, actor.actor_id, "rejected_size", row_count)
            raise BatchTooLargeError(row_count, self._max_rows)

        allowed = await self._rate_limiter.allow(actor.actor_id)
        log_rate_limit_decision(request_id, "import", actor.actor_id, allowed)
        if not allowed:
            log_import_outcome(request_id, actor.actor_id, "rejected_rate", row_count)
            raise RateLimitExceeded(actor.actor_id)

        drafts, row_errors = validate_rows(rows)
        if row_errors:
            log_import_outcome(
                request_id,
                actor.actor_id,
                "rejected_validation",
                row_count,
                failed_rows=[row_error.row for row_error in row_errors],
            )
            raise BatchValidationError(row_errors)

        try:
            imported = await self._repository.run_atomic(
                lambda store: self._persist(store, actor, drafts)
            )
        except PersistenceError:
            log_import_outcome(request_id, actor.actor_id, "persistence_failed", row_count)
            raise

        log_import_outcome(request_id, actor.actor_id, "committed", row_count, imported=imported)
        return ImportResult(imported_count=imported)

    async def _persist(
        self, store: BuyerRepository, actor: ActorContext, drafts: list[BuyerDraft]
    ) -> int:
        now = self._clock()
        for draft in drafts:
            lead = BuyerLead.from_draft(str(uuid4()), actor.actor_id, draft, now)
            lead_id = await store.insert(lead)
            await self._audit_recorder.record(
                store, HistoryAction.CREATED, actor, lead_id, draft.supplied_fields
            )
        return len(drafts)
