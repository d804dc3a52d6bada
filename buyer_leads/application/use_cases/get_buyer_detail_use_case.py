"""Buyer lead detail use case."""

from buyer_leads.application.dtos.buyer import BuyerDetailResponse
from buyer_leads.application.ports.buyer_repository import BuyerRepository
from buyer_leads.domain.errors import NotFoundError


class GetBuyerDetailUseCase:
    """Use case for fetching one lead with its owner and recent history."""

    def __init__(self, repository: BuyerRepository, history_limit: int = 5) -> None:
        """
        Initialize use case.

        Args:
            repository: Buyer repository
            history_limit: Number of most recent history entries to include
        """
        self._repository = repository
        self._history_limit = history_limit

    async def execute(self, lead_id: str) -> BuyerDetailResponse:
        """
        Fetch a lead by id.

        Raises:
            NotFoundError: If the lead does not exist
        """
        lead = await self._repository.find(lead_id)
        if lead is None:
            raise NotFoundError("Buyer not found")
        history = await self._repository.list_history(lead_id, limit=self._history_limit)
        return BuyerDetailResponse.from_entities(lead, history)
