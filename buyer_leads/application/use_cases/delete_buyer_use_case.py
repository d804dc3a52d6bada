"""Delete buyer lead use case."""

from buyer_leads.application.ports.buyer_repository import BuyerRepository
from buyer_leads.domain.errors import AuthorizationError, NotFoundError
from buyer_leads.domain.value_objects.actor_context import ActorContext
from buyer_leads.infrastructure.logging.logger import log_mutation


class DeleteBuyerUseCase:
    """Use case for deleting a buyer lead and its history."""

    def __init__(self, repository: BuyerRepository) -> None:
        """
        Initialize use case.

        Args:
            repository: Buyer repository
        """
        self._repository = repository

    async def execute(self, actor: ActorContext, lead_id: str, request_id: str = "delete") -> None:
        """
        Delete a lead owned by the actor, together with all of its history.

        Args:
            actor: Acting identity; must own the lead
            lead_id: Lead identifier
            request_id: Correlation id for logging

        Raises:
            NotFoundError: If the lead does not exist
            AuthorizationError: If the actor does not own the lead
            PersistenceError: If the store fails
        """
        lead = await self._repository.find(lead_id)
        if lead is None:
            raise NotFoundError("Buyer not found")
        if lead.owner_id != actor.actor_id:
            raise AuthorizationError("You can only delete your own leads")

        await self._repository.run_atomic(lambda store: store.delete(lead_id))
        log_mutation(request_id, actor.actor_id, "deleted", buyer_id=lead_id)
