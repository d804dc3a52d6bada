"""CSV encoding and decoding of buyer leads."""

import csv
import io
import json
from collections.abc import Iterable, Iterator

from buyer_leads.application.validation.enum_normalizer import bhk_external_token
from buyer_leads.domain.entities.buyer_lead import BuyerLead

EXPORT_COLUMNS = [
    "fullName",
    "email",
    "phone",
    "city",
    "propertyType",
    "bhk",
    "purpose",
    "budgetMin",
    "budgetMax",
    "timeline",
    "source",
    "notes",
    "tags",
    "status",
    "updatedAt",
]


def parse_buyer_csv(text: str) -> list[dict[str, str]]:
    """
    Parse CSV text with a header row into raw buyer rows.

    Header names are trimmed, blank lines are skipped and empty cells are dropped so
    they count as absent fields. Values are left as text for the normalizer.

    Args:
        text: CSV document

    Returns:
        List of rows keyed by header name

    Raises:
        ValueError: If the document has no header row
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    header = next(reader, None)
    if not header or not any(name.strip() for name in header):
        raise ValueError("CSV file has no header row")
    columns = [name.strip() for name in header]

    rows: list[dict[str, str]] = []
    for values in reader:
        if not any(value.strip() for value in values):
            continue
        row = {
            column: value
            for column, value in zip(columns, values)
            if column and value.strip()
        }
        rows.append(row)
    return rows


def _export_record(lead: BuyerLead) -> dict[str, object]:
    return {
        "fullName": lead.full_name,
        "email": lead.email or "",
        "phone": lead.phone,
        "city": lead.city.value,
        "propertyType": lead.property_type.value,
        "bhk": bhk_external_token(lead.bhk) or "",
        "purpose": lead.purpose.value,
        "budgetMin": "" if lead.budget_min is None else lead.budget_min,
        "budgetMax": "" if lead.budget_max is None else lead.budget_max,
        "timeline": lead.timeline.value,
        "source": lead.source.value,
        "notes": lead.notes or "",
        "tags": json.dumps(lead.tags) if lead.tags else "",
        "status": lead.status.value,
        "updatedAt": lead.updated_at.isoformat(),
    }


def iter_buyers_csv(leads: Iterable[BuyerLead]) -> Iterator[str]:
    """
    Yield CSV text one line at a time with a fixed column order.

    The header comes first. Tags are serialized as a JSON array string and updatedAt
    as ISO-8601.

    Args:
        leads: Leads to export

    Yields:
        The header line, then one line per lead
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    yield buffer.getvalue()
    for lead in leads:
        buffer.seek(0)
        buffer.truncate(0)
        writer.writerow(_export_record(lead))
        yield buffer.getvalue()


def render_buyers_csv(leads: Iterable[BuyerLead]) -> str:
    """Render leads as a complete CSV document including the header row."""
    return "".join(iter_buyers_csv(leads))
