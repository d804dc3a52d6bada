"""Buyer history (audit trail) entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class BuyerHistory:
    """Append-only record of one mutation applied to a buyer lead."""

    id: str
    buyer_id: str
    changed_by: str
    changed_at: datetime
    diff: dict[str, Any]

    @property
    def action(self) -> str:
        """Action tag stored in the diff payload."""
        return str(self.diff.get("action", ""))
