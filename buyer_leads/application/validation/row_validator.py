"""Full validation pipeline for one raw buyer row."""

from collections.abc import Mapping
from typing import Any, Optional

from buyer_leads.application.validation.cross_field_rules import validate_cross_fields
from buyer_leads.application.validation.enum_normalizer import normalize_row
from buyer_leads.application.validation.field_validator import validate_fields
from buyer_leads.domain.entities.buyer_lead import BuyerDraft
from buyer_leads.domain.errors import FieldError, RowError, ValidationError


def validate_row(row: Any) -> tuple[Optional[BuyerDraft], list[FieldError]]:
    """
    Normalize, field-validate, then cross-field-validate a raw row.

    Cross-field rules run only when every field is individually valid; their errors
    are appended after the field errors.

    Args:
        row: Raw row as received from the caller

    Returns:
        Tuple of (draft, errors). The draft is None whenever errors is non-empty.
    """
    if not isinstance(row, Mapping):
        return None, [FieldError("row", "Expected an object of buyer fields")]

    draft, errors = validate_fields(normalize_row(row))
    if draft is None:
        return None, errors

    errors = validate_cross_fields(draft)
    if errors:
        return None, errors
    return draft, []


def require_valid_row(row: Any) -> BuyerDraft:
    """
    Validate a single row, raising when it is invalid.

    Raises:
        ValidationError: If any field or cross-field check fails
    """
    draft, errors = validate_row(row)
    if draft is None:
        raise ValidationError(errors)
    return draft


def validate_rows(rows: list[Any]) -> tuple[list[BuyerDraft], list[RowError]]:
    """
    Validate every row of a batch independently.

    Args:
        rows: Raw rows in submission order

    Returns:
        Tuple of (drafts for valid rows, errors for invalid rows with 1-based row numbers)
    """
    drafts: list[BuyerDraft] = []
    row_errors: list[RowError] = []
    for index, row in enumerate(rows, start=1):
        draft, errors = validate_row(row)
        if draft is None:
            row_errors.append(RowError(row=index, errors=tuple(errors)))
        else:
            drafts.append(draft)
    return drafts, row_errors
