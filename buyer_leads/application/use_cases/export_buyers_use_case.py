"""Export buyer leads use case."""

from collections.abc import Iterator

from buyer_leads.application.dtos.buyer import BuyerFilters
from buyer_leads.application.ports.buyer_repository import BuyerRepository
from buyer_leads.application.services.csv_codec import iter_buyers_csv
from buyer_leads.domain.value_objects.actor_context import ActorContext
from buyer_leads.infrastructure.logging.logger import log_event


class ExportBuyersUseCase:
    """Use case for exporting every lead matching the filters as CSV."""

    def __init__(self, repository: BuyerRepository) -> None:
        """
        Initialize use case.

        Args:
            repository: Buyer repository
        """
        self._repository = repository

    async def execute(
        self, actor: ActorContext, filters: BuyerFilters, request_id: str = "export"
    ) -> Iterator[str]:
        """
        Load all matching leads and return their CSV lines for streaming.

        Args:
            actor: Acting identity requesting the export
            filters: Filters and ordering applied to the export
            request_id: Correlation id for logging

        Returns:
            Iterator over the header line and one line per lead
        """
        leads, total = await self._repository.search(filters)
        log_event(
            request_id=request_id,
            component="export",
            actor_id=actor.actor_id,
            export_rows=total,
        )
        return iter_buyers_csv(leads)
