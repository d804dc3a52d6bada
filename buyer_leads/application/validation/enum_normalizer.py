"""Normalization of loosely-typed external values into canonical tokens."""

import json
from collections.abc import Mapping
from typing import Any, Optional

from buyer_leads.domain.entities.buyer_lead import FIELD_ATTRIBUTES
from buyer_leads.domain.enums import BHK

_BHK_BY_EXTERNAL_TOKEN: dict[str, BHK] = {
    "1": BHK.ONE,
    "2": BHK.TWO,
    "3": BHK.THREE,
    "4": BHK.FOUR,
    "Studio": BHK.STUDIO,
}
_EXTERNAL_TOKEN_BY_BHK: dict[BHK, str] = {bhk: token for token, bhk in _BHK_BY_EXTERNAL_TOKEN.items()}


def normalize_text(value: Any) -> Any:
    """
    Trim a text value; blank strings become absent.

    Args:
        value: Raw value

    Returns:
        Trimmed string, None for blank input, or the value unchanged if it is not a string
    """
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def normalize_bhk(value: Any) -> Any:
    """
    Map an external BHK token ("1".."4", "Studio") to BHK.

    Anything else, canonical names such as "One" included, is returned unchanged so
    the field validator can report it.

    Args:
        value: Raw BHK value

    Returns:
        BHK member, None when absent, or the unrecognized value
    """
    if value is None or isinstance(value, BHK):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return _BHK_BY_EXTERNAL_TOKEN.get(str(value), value)
    if isinstance(value, str):
        token = value.strip()
        if not token:
            return None
        return _BHK_BY_EXTERNAL_TOKEN.get(token, token)
    return value


def bhk_external_token(bhk: Optional[BHK]) -> Optional[str]:
    """Render a BHK member in its external form ("1".."4", "Studio")."""
    if bhk is None:
        return None
    return _EXTERNAL_TOKEN_BY_BHK[bhk]


def _clean_tags(items: Any) -> list[str]:
    cleaned = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            cleaned.append(text)
    return cleaned


def _split_tags(text: str) -> list[str]:
    return _clean_tags(text.split(","))


def normalize_tags(value: Any) -> Any:
    """
    Normalize tags from a list, a comma-separated string, or a JSON array string.

    No deduplication is applied. An empty result is treated as absent.

    Args:
        value: Raw tags value

    Returns:
        List of trimmed non-empty strings, None when absent, or the value unchanged
        if it is neither a list nor a string
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        tags = _clean_tags(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                parsed = None
            tags = _clean_tags(parsed) if isinstance(parsed, list) else _split_tags(text)
        else:
            tags = _split_tags(text)
    else:
        return value
    return tags or None


def normalize_budget(value: Any) -> Any:
    """
    Parse a budget into an integer; empty input is absent, not zero.

    Thousands separators ("13,00,000", "1,500,000") are accepted. Non-numeric input is
    returned unchanged so the field validator can report it.

    Args:
        value: Raw budget value

    Returns:
        Integer, None when absent, or the unparseable value
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        cleaned = text.replace(",", "")
        digits = cleaned[1:] if cleaned[:1] in ("+", "-") else cleaned
        if digits.isascii() and digits.isdigit():
            return int(cleaned)
        return text
    return value


_NORMALIZERS = {
    "bhk": normalize_bhk,
    "tags": normalize_tags,
    "budgetMin": normalize_budget,
    "budgetMax": normalize_budget,
}


def normalize_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normalize every recognized field of a raw row.

    Unknown keys are dropped. Fields that normalize to absent are omitted.

    Args:
        row: Raw row keyed by external field name

    Returns:
        Normalized row keyed by external field name
    """
    normalized: dict[str, Any] = {}
    for name in FIELD_ATTRIBUTES:
        if name not in row:
            continue
        normalizer = _NORMALIZERS.get(name, normalize_text)
        value = normalizer(row[name])
        if value is not None:
            normalized[name] = value
    return normalized
