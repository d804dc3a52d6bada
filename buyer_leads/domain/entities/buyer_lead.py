"""Buyer lead entity and its validated field set."""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Optional

from buyer_leads.domain.enums import BHK, City, PropertyType, Purpose, Source, Status, Timeline

# External (wire) field name -> entity attribute, in canonical field order.
FIELD_ATTRIBUTES: dict[str, str] = {
    "fullName": "full_name",
    "email": "email",
    "phone": "phone",
    "city": "city",
    "propertyType": "property_type",
    "bhk": "bhk",
    "purpose": "purpose",
    "budgetMin": "budget_min",
    "budgetMax": "budget_max",
    "timeline": "timeline",
    "source": "source",
    "notes": "notes",
    "tags": "tags",
    "status": "status",
}


@dataclass(frozen=True)
class BuyerDraft:
    """Field-valid, typed buyer data that has not been persisted yet."""

    full_name: str
    phone: str
    city: City
    property_type: PropertyType
    purpose: Purpose
    timeline: Timeline
    source: Source
    email: Optional[str] = None
    bhk: Optional[BHK] = None
    budget_min: Optional[int] = None
    budget_max: Optional[int] = None
    notes: Optional[str] = None
    tags: Optional[list[str]] = None
    status: Optional[Status] = None
    # External names of the fields the caller actually supplied
    supplied_fields: tuple[str, ...] = ()

    def to_patch(self) -> dict[str, Any]:
        """
        Build an update patch from the draft.

        Every field is replaced except status, which is only included when supplied.

        Returns:
            Mapping of entity attribute name to new value
        """
        patch = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in ("status", "supplied_fields")
        }
        if self.status is not None:
            patch["status"] = self.status
        return patch


@dataclass
class BuyerLead:
    """Persisted buyer lead."""

    id: str
    owner_id: str
    full_name: str
    phone: str
    city: City
    property_type: PropertyType
    purpose: Purpose
    timeline: Timeline
    source: Source
    email: Optional[str] = None
    bhk: Optional[BHK] = None
    budget_min: Optional[int] = None
    budget_max: Optional[int] = None
    notes: Optional[str] = None
    tags: Optional[list[str]] = None
    status: Status = Status.NEW
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_draft(
        cls, lead_id: str, owner_id: str, draft: BuyerDraft, now: datetime
    ) -> "BuyerLead":
        """Create a new lead from a validated draft, defaulting status to New."""
        return cls(
            id=lead_id,
            owner_id=owner_id,
            full_name=draft.full_name,
            phone=draft.phone,
            city=draft.city,
            property_type=draft.property_type,
            purpose=draft.purpose,
            timeline=draft.timeline,
            source=draft.source,
            email=draft.email,
            bhk=draft.bhk,
            budget_min=draft.budget_min,
            budget_max=draft.budget_max,
            notes=draft.notes,
            tags=list(draft.tags) if draft.tags is not None else None,
            status=draft.status or Status.NEW,
            created_at=now,
            updated_at=now,
        )

    def patched(self, patch: dict[str, Any], now: datetime) -> "BuyerLead":
        """
        Return a copy with the patch applied and updated_at refreshed.

        Raises:
            ValueError: If the patch names an attribute that cannot be changed
        """
        immutable = {"id", "owner_id", "created_at", "updated_at"}
        known = {f.name for f in fields(self)}
        for name in patch:
            if name in immutable or name not in known:
                raise ValueError(f"Cannot patch attribute: {name}")
        return replace(self, **patch, updated_at=now)
