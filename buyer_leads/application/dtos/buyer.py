"""Buyer lead DTOs."""

from datetime import datetime
from typing import Any, Literal, Optional

from buyer_leads.application.dtos.base import DTO, CamelDTO
from buyer_leads.application.validation.enum_normalizer import bhk_external_token
from buyer_leads.domain.entities.buyer_history import BuyerHistory
from buyer_leads.domain.entities.buyer_lead import BuyerLead
from buyer_leads.domain.enums import City, PropertyType, Purpose, Source, Status, Timeline

SortField = Literal["updatedAt", "createdAt", "fullName"]
SortOrder = Literal["asc", "desc"]

# Sort field -> entity attribute
SORT_ATTRIBUTES: dict[str, str] = {
    "updatedAt": "updated_at",
    "createdAt": "created_at",
    "fullName": "full_name",
}


class BuyerFilters(DTO):
    """Filters shared by listing and export."""

    city: Optional[City] = None
    property_type: Optional[PropertyType] = None
    status: Optional[Status] = None
    timeline: Optional[Timeline] = None
    search: Optional[str] = None
    sort: SortField = "updatedAt"
    order: SortOrder = "desc"


class BuyerResponse(CamelDTO):
    """Buyer lead as returned to callers."""

    id: str
    owner_id: str
    full_name: str
    email: Optional[str] = None
    phone: str
    city: City
    property_type: PropertyType
    bhk: Optional[str] = None
    purpose: Purpose
    budget_min: Optional[int] = None
    budget_max: Optional[int] = None
    timeline: Timeline
    source: Source
    notes: Optional[str] = None
    tags: Optional[list[str]] = None
    status: Status
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, lead: BuyerLead) -> "BuyerResponse":
        """Build the response from a lead entity."""
        return cls(**_lead_fields(lead))


class HistoryEntryResponse(CamelDTO):
    """Audit entry as returned to callers."""

    id: str
    buyer_id: str
    changed_by: str
    changed_at: datetime
    diff: dict[str, Any]

    @classmethod
    def from_entity(cls, entry: BuyerHistory) -> "HistoryEntryResponse":
        """Build the response from a history entity."""
        return cls(
            id=entry.id,
            buyer_id=entry.buyer_id,
            changed_by=entry.changed_by,
            changed_at=entry.changed_at,
            diff=entry.diff,
        )


class OwnerResponse(CamelDTO):
    """Identity of the actor owning a lead."""

    id: str


class BuyerDetailResponse(BuyerResponse):
    """Buyer lead with its owner and most recent history entries."""

    owner: OwnerResponse
    history: list[HistoryEntryResponse]

    @classmethod
    def from_entities(
        cls, lead: BuyerLead, history: list[BuyerHistory]
    ) -> "BuyerDetailResponse":
        """Build the detail response from a lead and its history, newest first."""
        return cls(
            **_lead_fields(lead),
            owner=OwnerResponse(id=lead.owner_id),
            history=[HistoryEntryResponse.from_entity(entry) for entry in history],
        )


class Pagination(CamelDTO):
    """Pagination metadata for list responses."""

    total: int
    pages: int
    page: int
    limit: int


class BuyerListResponse(CamelDTO):
    """One page of buyer leads."""

    items: list[BuyerResponse]
    pagination: Pagination


def _lead_fields(lead: BuyerLead) -> dict[str, Any]:
    return {
        "id": lead.id,
        "owner_id": lead.owner_id,
        "full_name": lead.full_name,
        "email": lead.email,
        "phone": lead.phone,
        "city": lead.city,
        "property_type": lead.property_type,
        "bhk": bhk_external_token(lead.bhk),
        "purpose": lead.purpose,
        "budget_min": lead.budget_min,
        "budget_max": lead.budget_max,
        "timeline": lead.timeline,
        "source": lead.source,
        "notes": lead.notes,
        "tags": lead.tags,
        "status": lead.status,
        "created_at": lead.created_at,
        "updated_at": lead.updated_at,
    }
