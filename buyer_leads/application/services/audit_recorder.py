"""Audit trail recording for buyer lead mutations."""

from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from uuid import uuid4

from buyer_leads.application.ports.buyer_repository import BuyerRepository
from buyer_leads.domain.entities.buyer_history import BuyerHistory
from buyer_leads.domain.enums import HistoryAction
from buyer_leads.domain.value_objects.actor_context import ActorContext


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditRecorder:
    """
    Builds and appends one history entry per mutation.

    The diff payload records the action tag and the names of the fields that were
    supplied, never their values: {"action": "created", "fields": ["fullName", ...]}.
    """

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        """
        Initialize the recorder.

        Args:
            clock: Source of the changed_at timestamp
        """
        self._clock = clock

    def build_entry(
        self,
        action: HistoryAction,
        actor: ActorContext,
        buyer_id: str,
        fields: Iterable[str],
    ) -> BuyerHistory:
        """
        Build a history entry without storing it.

        Args:
            action: Mutation kind
            actor: Acting identity
            buyer_id: Lead the mutation applied to
            fields: External names of the fields the caller supplied

        Returns:
            New history entry
        """
        return BuyerHistory(
            id=str(uuid4()),
            buyer_id=buyer_id,
            changed_by=actor.actor_id,
            changed_at=self._clock(),
            diff={"action": action.value, "fields": list(fields)},
        )

    async def record(
        self,
        store: BuyerRepository,
        action: HistoryAction,
        actor: ActorContext,
        buyer_id: str,
        fields: Iterable[str],
    ) -> BuyerHistory:
        """
        Build a history entry and append it through the given store.

        Pass the transaction-bound store from run_atomic so the entry commits or
        rolls back together with the mutation it describes.

        Returns:
            The stored history entry
        """
        entry = self.build_entry(action, actor, buyer_id, fields)
        await store.append_history(entry)
        return entry
