"""In-memory buyer repository adapter."""

import asyncio
import copy
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, Optional, TypeVar

from buyer_leads.application.dtos.buyer import SORT_ATTRIBUTES, BuyerFilters
from buyer_leads.application.ports.buyer_repository import BuyerRepository
from buyer_leads.domain.entities.buyer_history import BuyerHistory
from buyer_leads.domain.entities.buyer_lead import BuyerLead
from buyer_leads.domain.errors import NotFoundError, PersistenceError

T = TypeVar("T")


class InMemoryBuyerRepository(BuyerRepository):
    """In-memory implementation of buyer repository for single-process deployments."""

    def __init__(self, clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)) -> None:
        """
        Initialize in-memory repository.

        Args:
            clock: Source of updated_at timestamps on update
        """
        self._leads: dict[str, BuyerLead] = {}
        self._history: list[BuyerHistory] = []
        self._clock = clock
        # Serializes atomic units; stands in for transaction isolation
        self._lock = asyncio.Lock()

    async def insert(self, lead: BuyerLead) -> str:
        """
        Insert a new lead.

        Args:
            lead: Lead to insert

        Returns:
            Id of the inserted lead
        """
        if lead.id in self._leads:
            raise PersistenceError(f"Buyer {lead.id} already exists")
        self._leads[lead.id] = copy.deepcopy(lead)
        return lead.id

    async def update(self, lead_id: str, patch: dict[str, Any]) -> BuyerLead:
        """
        Apply a patch to an existing lead.

        Args:
            lead_id: Lead identifier
            patch: Mapping of attribute name to new value

        Returns:
            The updated lead
        """
        lead = self._leads.get(lead_id)
        if lead is None:
            raise NotFoundError("Buyer not found")
        updated = lead.patched(copy.deepcopy(patch), self._clock())
        self._leads[lead_id] = updated
        return copy.deepcopy(updated)

    async def find(self, lead_id: str) -> Optional[BuyerLead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier

        Returns:
            Lead, or None if not found
        """
        lead = self._leads.get(lead_id)
        return copy.deepcopy(lead) if lead is not None else None

    async def delete(self, lead_id: str) -> None:
        """
        Delete a lead and its history.

        Args:
            lead_id: Lead identifier
        """
        self._history = [entry for entry in self._history if entry.buyer_id != lead_id]
        self._leads.pop(lead_id, None)

    async def append_history(self, entry: BuyerHistory) -> None:
        """
        Append an audit entry.

        Args:
            entry: History entry to store
        """
        if entry.buyer_id not in self._leads:
            raise PersistenceError(f"History references unknown buyer {entry.buyer_id}")
        self._history.append(copy.deepcopy(entry))

    async def list_history(self, buyer_id: str, limit: Optional[int] = None) -> list[BuyerHistory]:
        """
        List history entries of a lead, newest first.

        Args:
            buyer_id: Lead identifier
            limit: Maximum number of entries, or None for all

        Returns:
            History entries ordered by changed_at descending, then id descending
        """
        # Ties on changed_at fall back to id, matching the SQL ordering
        entries = [entry for entry in self._history if entry.buyer_id == buyer_id]
        entries.sort(key=lambda entry: (entry.changed_at, entry.id), reverse=True)
        if limit is not None:
            entries = entries[:limit]
        return copy.deepcopy(entries)

    def _matches(self, lead: BuyerLead, filters: BuyerFilters) -> bool:
        if filters.city is not None and lead.city != filters.city:
            return False
        if filters.property_type is not None and lead.property_type != filters.property_type:
            return False
        if filters.status is not None and lead.status != filters.status:
            return False
        if filters.timeline is not None and lead.timeline != filters.timeline:
            return False
        if filters.search:
            needle = filters.search.lower()
            haystacks = (lead.full_name, lead.email or "", lead.phone)
            return any(needle in haystack.lower() for haystack in haystacks)
        return True

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
        matching = [lead for lead in self._leads.values() if self._matches(lead, filters)]
        attribute = SORT_ATTRIBUTES[filters.sort]
        matching.sort(key=lambda lead: getattr(lead, attribute), reverse=filters.order == "desc")
        end = None if limit is None else offset + limit
        return copy.deepcopy(matching[offset:end]), len(matching)

    async def run_atomic(self, work: Callable[[BuyerRepository], Awaitable[T]]) -> T:
        """
        Run work inside one atomic unit, restoring the previous state on failure.

        Args:
            work: Coroutine function performing the writes

        Returns:
            Whatever the work returns
        """
        async with self._lock:
            leads_snapshot = dict(self._leads)
            history_snapshot = list(self._history)
            try:
                return await work(self)
            except Exception:
                self._leads = leads_snapshot
                self._history = history_snapshot
                raise
