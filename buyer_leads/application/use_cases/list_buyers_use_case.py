"""List buyer leads use case."""

import math

from buyer_leads.application.dtos.buyer import (
    BuyerFilters,
    BuyerListResponse,
    BuyerResponse,
    Pagination,
)
from buyer_leads.application.ports.buyer_repository import BuyerRepository


class ListBuyersUseCase:
    """Use case for listing buyer leads one page at a time."""

    def __init__(self, repository: BuyerRepository, page_size: int = 10) -> None:
        """
        Initialize use case.

        Args:
            repository: Buyer repository
            page_size: Fixed number of leads per page
        """
        self._repository = repository
        self._page_size = page_size

    async def execute(self, filters: BuyerFilters, page: int = 1) -> BuyerListResponse:
        """
        Get one page of leads matching the filters, most recently updated first.

        Args:
            filters: Equality filters and free-text search
            page: 1-based page number (values below 1 are treated as 1)

        Returns:
            Page of leads with pagination metadata
        """
        page = max(page, 1)
        offset = (page - 1) * self._page_size
        leads, total = await self._repository.search(filters, offset=offset, limit=self._page_size)
        return BuyerListResponse(
            items=[BuyerResponse.from_entity(lead) for lead in leads],
            pagination=Pagination(
                total=total,
                pages=math.ceil(total / self._page_size),
                page=page,
                limit=self._page_size,
            ),
        )
