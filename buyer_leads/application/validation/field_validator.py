"""Per-field validation of a normalized buyer row."""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, TypeVar

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from buyer_leads.domain.entities.buyer_lead import BuyerDraft
from buyer_leads.domain.enums import BHK, City, PropertyType, Purpose, Source, Status, Timeline
from buyer_leads.domain.errors import FieldError

E = TypeVar("E", bound=Enum)

FULL_NAME_LENGTH = (2, 80)
PHONE_LENGTH = (10, 15)
NOTES_MAX_LENGTH = 1000
BHK_CHOICES = ("1", "2", "3", "4", "Studio")
# Largest value a BIGINT budget column can hold
MAX_BUDGET = 2**63 - 1

_email_adapter = TypeAdapter(EmailStr)


def _check_text(
    row: Mapping[str, Any],
    name: str,
    required: bool,
    min_length: int = 0,
    max_length: Optional[int] = None,
) -> tuple[Optional[str], list[FieldError]]:
    value = row.get(name)
    if value is None:
        return None, [FieldError(name, "Required")] if required else []
    if not isinstance(value, str):
        return None, [FieldError(name, "Expected a string")]
    if len(value) < min_length:
        return None, [FieldError(name, f"Must be at least {min_length} characters")]
    if max_length is not None and len(value) > max_length:
        return None, [FieldError(name, f"Must be at most {max_length} characters")]
    return value, []


def _check_enum(
    row: Mapping[str, Any],
    name: str,
    enum_cls: type[E],
    required: bool,
) -> tuple[Optional[E], list[FieldError]]:
    value = row.get(name)
    if value is None:
        return None, [FieldError(name, "Required")] if required else []
    if isinstance(value, enum_cls):
        return value, []
    try:
        return enum_cls(value), []
    except ValueError:
        expected = ", ".join(member.value for member in enum_cls)
        return None, [FieldError(name, f"Invalid value '{value}'; expected one of: {expected}")]


def _check_email(row: Mapping[str, Any]) -> tuple[Optional[str], list[FieldError]]:
    value, errors = _check_text(row, "email", required=False)
    if value is None:
        return None, errors
    try:
        return str(_email_adapter.validate_python(value)), []
    except PydanticValidationError:
        return None, [FieldError("email", f"Invalid email address '{value}'")]


def _check_positive_int(row: Mapping[str, Any], name: str) -> tuple[Optional[int], list[FieldError]]:
    value = row.get(name)
    if value is None:
        return None, []
    if isinstance(value, bool) or not isinstance(value, int):
        return None, [FieldError(name, f"Expected an integer, received '{value}'")]
    if value <= 0:
        return None, [FieldError(name, "Must be a positive integer")]
    if value > MAX_BUDGET:
        return None, [FieldError(name, f"Must be at most {MAX_BUDGET}")]
    return value, []


def _check_bhk(row: Mapping[str, Any]) -> tuple[Optional[BHK], list[FieldError]]:
    # Only tokens the normalizer mapped are valid; canonical names are not accepted
    value = row.get("bhk")
    if value is None or isinstance(value, BHK):
        return value, []
    expected = ", ".join(BHK_CHOICES)
    return None, [FieldError("bhk", f"Invalid value '{value}'; expected one of: {expected}")]


def _check_tags(row: Mapping[str, Any]) -> tuple[Optional[list[str]], list[FieldError]]:
    value = row.get("tags")
    if value is None:
        return None, []
    if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
        return None, [FieldError("tags", "Expected a list of strings")]
    return value, []


def validate_fields(row: Mapping[str, Any]) -> tuple[Optional[BuyerDraft], list[FieldError]]:
    """
    Validate each field of a normalized row independently.

    All field errors are collected; validation never stops at the first failure.

    Args:
        row: Row produced by the enum normalizer, keyed by external field name

    Returns:
        Tuple of (draft, errors). The draft is None whenever errors is non-empty.
    """
    errors: list[FieldError] = []

    def collect(result: tuple[Any, list[FieldError]]) -> Any:
        value, field_errors = result
        errors.extend(field_errors)
        return value

    full_name = collect(_check_text(row, "fullName", True, *FULL_NAME_LENGTH))
    email = collect(_check_email(row))
    phone = collect(_check_text(row, "phone", True, *PHONE_LENGTH))
    city = collect(_check_enum(row, "city", City, required=True))
    property_type = collect(_check_enum(row, "propertyType", PropertyType, required=True))
    bhk = collect(_check_bhk(row))
    purpose = collect(_check_enum(row, "purpose", Purpose, required=True))
    budget_min = collect(_check_positive_int(row, "budgetMin"))
    budget_max = collect(_check_positive_int(row, "budgetMax"))
    timeline = collect(_check_enum(row, "timeline", Timeline, required=True))
    source = collect(_check_enum(row, "source", Source, required=True))
    notes = collect(_check_text(row, "notes", False, max_length=NOTES_MAX_LENGTH))
    tags = collect(_check_tags(row))
    status = collect(_check_enum(row, "status", Status, required=False))

    if errors:
        return None, errors

    draft = BuyerDraft(
        full_name=full_name,
        phone=phone,
        city=city,
        property_type=property_type,
        purpose=purpose,
        timeline=timeline,
        source=source,
        email=email,
        bhk=bhk,
        budget_min=budget_min,
        budget_max=budget_max,
        notes=notes,
        tags=tags,
        status=status,
        supplied_fields=tuple(name for name in row if row[name] is not None),
    )
    return draft, []
