"""Buyer repository port."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, Optional, TypeVar

from buyer_leads.application.dtos.buyer import BuyerFilters
from buyer_leads.domain.entities.buyer_history import BuyerHistory
from buyer_leads.domain.entities.buyer_lead import BuyerLead

T = TypeVar("T")


class BuyerRepository(ABC):
    """Port interface for buyer lead and history persistence."""

    @abstractmethod
    async def insert(self, lead: BuyerLead) -> str:
        """
        Insert a new lead.

        Args:
            lead: Lead to insert

        Returns:
            Id of the inserted lead
        """
        pass

    @abstractmethod
    async def update(self, lead_id: str, patch: dict[str, Any]) -> BuyerLead:
        """
        Apply a patch to an existing lead and refresh updated_at.

        Args:
            lead_id: Lead identifier
            patch: Mapping of attribute name to new value

        Returns:
            The updated lead

        Raises:
            NotFoundError: If the lead does not exist
        """
        pass

    @abstractmethod
    async def find(self, lead_id: str) -> Optional[BuyerLead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier

        Returns:
            Lead, or None if not found
        """
        pass

    @abstractmethod
    async def delete(self, lead_id: str) -> None:
        """
        Delete a lead together with all of its history entries.

        Args:
            lead_id: Lead identifier
        """
        pass

    @abstractmethod
    async def append_history(self, entry: BuyerHistory) -> None:
        """
        Append an audit entry.

        Args:
            entry: History entry to store
        """
        pass

    @abstractmethod
    async def list_history(self, buyer_id: str, limit: Optional[int] = None) -> list[BuyerHistory]:
        """
        List history entries of a lead, newest first.

        Args:
            buyer_id: Lead identifier
            limit: Maximum number of entries, or None for all

        Returns:
            History entries ordered by changed_at descending, then id descending
        """
        pass

    @abstractmethod
    async def search(
        self, filters: BuyerFilters, offset: int = 0, limit: Optional[int] = None
    ) -> tuple[list[BuyerLead], int]:
        """
        Search leads matching the filters.

        Args:
            filters: Equality filters, free-text search and ordering
            offset: Number of matching leads to skip
            limit: Maximum number of leads to return, or None for all

        Returns:
            Tuple of (page of leads, total number of matching leads)
        """
        pass

    @abstractmethod
    async def run_atomic(self, work: Callable[["BuyerRepository"], Awaitable[T]]) -> T:
        """
        Run work inside one atomic unit.

        The work receives a repository bound to the unit. Everything it writes becomes
        visible when it returns; if it raises, nothing it wrote is kept.

        Args:
            work: Coroutine function performing the writes

        Returns:
            Whatever the work returns

        Raises:
            PersistenceError: If the store fails to apply or commit the unit
        """
        pass
