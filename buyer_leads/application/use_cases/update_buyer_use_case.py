"""Update buyer lead use case."""

from typing import Any

from buyer_leads.application.ports.buyer_repository import BuyerRepository
from buyer_leads.application.services.audit_recorder import AuditRecorder
from buyer_leads.application.validation.row_validator import require_valid_row
from buyer_leads.domain.entities.buyer_lead import BuyerLead
from buyer_leads.domain.enums import HistoryAction
from buyer_leads.domain.errors import NotFoundError
from buyer_leads.domain.value_objects.actor_context import ActorContext
from buyer_leads.infrastructure.logging.logger import log_mutation


class UpdateBuyerUseCase:
    """Use case for replacing the fields of an existing buyer lead."""

    def __init__(self, repository: BuyerRepository, audit_recorder: AuditRecorder) -> None:
        """
        Initialize use case.

        Args:
            repository: Buyer repository
            audit_recorder: Recorder for the "updated" entry
        """
        self._repository = repository
        self._audit_recorder = audit_recorder

    async def execute(
        self,
        actor: ActorContext,
        lead_id: str,
        row: Any,
        request_id: str = "update",
    ) -> BuyerLead:
        """
        Re-validate the full row and apply it to the lead.

        Status is kept as stored when the row omits it.

        Args:
            actor: Acting identity recorded on the history entry
            lead_id: Lead identifier
            row: Raw row in the same shape consumed by create
            request_id: Correlation id for logging

        Returns:
            The updated lead

        Raises:
            NotFoundError: If the lead does not exist
            ValidationError: If the row is invalid
            PersistenceError: If the store fails
        """
        if await self._repository.find(lead_id) is None:
            raise NotFoundError("Buyer not found")

        draft = require_valid_row(row)

        async def _persist(store: BuyerRepository) -> BuyerLead:
            updated = await store.update(lead_id, draft.to_patch())
            await self._audit_recorder.record(
                store, HistoryAction.UPDATED, actor, lead_id, draft.supplied_fields
            )
            return updated

        lead = await self._repository.run_atomic(_persist)
        log_mutation(
            request_id, actor.actor_id, "updated", buyer_id=lead_id, fields=list(draft.supplied_fields)
        )
        return lead
