"""Canonical enumerations for buyer leads."""

from enum import Enum


class City(str, Enum):
    """Cities served."""

    CHANDIGARH = "Chandigarh"
    MOHALI = "Mohali"
    ZIRAKPUR = "Zirakpur"
    PANCHKULA = "Panchkula"
    OTHER = "Other"


class PropertyType(str, Enum):
    """Kind of property the buyer is looking for."""

    APARTMENT = "Apartment"
    VILLA = "Villa"
    PLOT = "Plot"
    OFFICE = "Office"
    RETAIL = "Retail"

    @property
    def requires_bhk(self) -> bool:
        """Whether a BHK size must be provided for this property type."""
        return self in (PropertyType.APARTMENT, PropertyType.VILLA)


class BHK(str, Enum):
    """Housing unit size (bedroom-hall-kitchen count)."""

    ONE = "One"
    TWO = "Two"
    THREE = "Three"
    FOUR = "Four"
    STUDIO = "Studio"


class Purpose(str, Enum):
    """Buy or rent."""

    BUY = "Buy"
    RENT = "Rent"


class Timeline(str, Enum):
    """Purchase timeline."""

    ZERO_TO_THREE_MONTHS = "ZeroToThreeMonths"
    THREE_TO_SIX_MONTHS = "ThreeToSixMonths"
    MORE_THAN_SIX_MONTHS = "MoreThanSixMonths"
    EXPLORING = "Exploring"


class Source(str, Enum):
    """Where the lead came from."""

    WEBSITE = "Website"
    REFERRAL = "Referral"
    WALK_IN = "WalkIn"
    CALL = "Call"
    OTHER = "Other"


class Status(str, Enum):
    """Sales pipeline status."""

    NEW = "New"
    QUALIFIED = "Qualified"
    CONTACTED = "Contacted"
    VISITED = "Visited"
    NEGOTIATION = "Negotiation"
    CONVERTED = "Converted"
    DROPPED = "Dropped"


class HistoryAction(str, Enum):
    """Mutation kinds recorded in the audit trail."""

    CREATED = "created"
    UPDATED = "updated"
