"""Invariants spanning more than one field of a field-valid buyer draft."""

from collections.abc import Callable

from buyer_leads.domain.entities.buyer_lead import BuyerDraft
from buyer_leads.domain.errors import FieldError

CrossFieldRule = Callable[[BuyerDraft], list[FieldError]]

BHK_REQUIRED_MESSAGE = "BHK is required for Apartment and Villa property types"
BUDGET_ORDER_MESSAGE = "Maximum budget must be greater than or equal to minimum budget"


def bhk_required_rule(draft: BuyerDraft) -> list[FieldError]:
    """Apartments and villas must state a BHK size."""
    if draft.property_type.requires_bhk and draft.bhk is None:
        return [FieldError("bhk", BHK_REQUIRED_MESSAGE)]
    return []


def budget_order_rule(draft: BuyerDraft) -> list[FieldError]:
    """When both budgets are given, the maximum cannot be below the minimum."""
    if draft.budget_min is None or draft.budget_max is None:
        return []
    if draft.budget_max < draft.budget_min:
        return [FieldError("budgetMax", BUDGET_ORDER_MESSAGE)]
    return []


CROSS_FIELD_RULES: tuple[CrossFieldRule, ...] = (bhk_required_rule, budget_order_rule)


def validate_cross_fields(
    draft: BuyerDraft, rules: tuple[CrossFieldRule, ...] = CROSS_FIELD_RULES
) -> list[FieldError]:
    """
    Evaluate every cross-field rule independently and concatenate their errors.

    Args:
        draft: Draft that already passed field validation
        rules: Rules to evaluate, in reporting order

    Returns:
        All cross-field errors (empty when the draft is consistent)
    """
    errors: list[FieldError] = []
    for rule in rules:
        errors.extend(rule(draft))
    return errors
