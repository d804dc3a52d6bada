"""Unit tests for buyer CSV parsing and rendering."""

import csv
import io
import json
from datetime import datetime, timezone

import pytest

from buyer_leads.application.services.csv_codec import (
    EXPORT_COLUMNS,
    iter_buyers_csv,
    parse_buyer_csv,
    render_buyers_csv,
)
from buyer_leads.application.validation.row_validator import validate_row
from buyer_leads.domain.entities.buyer_lead import BuyerLead
from buyer_leads.domain.enums import BHK, City, PropertyType, Purpose, Source, Status, Timeline


def _lead(**overrides):
    values = {
        "id": "lead-1",
        "owner_id": "agent-1",
        "full_name": "Aarav Sharma",
        "phone": "9876543210",
        "city": City.MOHALI,
        "property_type": PropertyType.APARTMENT,
        "bhk": BHK.TWO,
        "purpose": Purpose.BUY,
        "timeline": Timeline.ZERO_TO_THREE_MONTHS,
        "source": Source.WALK_IN,
        "tags": ["vip", "loan"],
        "status": Status.QUALIFIED,
        "updated_at": datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return BuyerLead(**values)


def test_parse_reads_header_and_drops_empty_cells():
    """Test rows are keyed by header and empty cells are absent."""
    text = (
        "fullName,phone,city,propertyType,bhk,purpose,timeline,source,tags\n"
        'Aarav Sharma,9876543210,Mohali,Plot,,Buy,Exploring,Website,"vip, loan"\n'
    )

    rows = parse_buyer_csv(text)

    assert rows == [
        {
            "fullName": "Aarav Sharma",
            "phone": "9876543210",
            "city": "Mohali",
            "propertyType": "Plot",
            "purpose": "Buy",
            "timeline": "Exploring",
            "source": "Website",
            "tags": "vip, loan",
        }
    ]


def test_parse_skips_blank_lines_and_tolerates_bom():
    """Test BOM-prefixed files and blank lines are handled."""
    text = "\ufefffullName,phone\n\nAarav,9876543210\n,\nPriya,9123456780\n"

    rows = parse_buyer_csv(text)

    assert rows == [
        {"fullName": "Aarav", "phone": "9876543210"},
        {"fullName": "Priya", "phone": "9123456780"},
    ]


def test_parse_without_header_raises():
    """Test an empty document is rejected."""
    with pytest.raises(ValueError, match="no header row"):
        parse_buyer_csv("")


def test_render_uses_fixed_column_order():
    """Test the header row follows the export column order."""
    output = render_buyers_csv([])

    assert output.splitlines() == [",".join(EXPORT_COLUMNS)]


def test_render_serializes_tags_bhk_and_timestamp():
    """Test tags as JSON, bhk as external token and updatedAt as ISO-8601."""
    output = render_buyers_csv([_lead(), _lead(id="lead-2", tags=None, bhk=None, budget_min=100)])

    records = list(csv.DictReader(io.StringIO(output)))

    assert records[0]["tags"] == '["vip", "loan"]'
    assert json.loads(records[0]["tags"]) == ["vip", "loan"]
    assert records[0]["bhk"] == "2"
    assert records[0]["source"] == "WalkIn"
    assert records[0]["status"] == "Qualified"
    assert records[0]["updatedAt"] == "2024-05-01T09:30:00+00:00"
    assert records[0]["email"] == ""
    assert records[1]["tags"] == ""
    assert records[1]["bhk"] == ""
    assert records[1]["budgetMin"] == "100"


def test_iter_yields_header_then_one_chunk_per_lead():
    """Test streaming output is produced lazily, one complete record per lead."""
    leads = [
        _lead(notes="call after 6pm\nprefers email"),
        _lead(id="lead-2", full_name="Priya Singh"),
    ]

    chunks = iter_buyers_csv(iter(leads))

    header = next(chunks)
    assert header == ",".join(EXPORT_COLUMNS) + "\n"
    remaining = list(chunks)
    assert len(remaining) == 2
    first = next(csv.DictReader(io.StringIO(header + remaining[0])))
    assert first["notes"] == "call after 6pm\nprefers email"
    assert remaining[1].startswith("Priya Singh,")


def test_exported_rows_import_back():
    """Test an exported file parses into rows that validate again."""
    rows = parse_buyer_csv(render_buyers_csv([_lead(budget_min=100, budget_max=200)]))

    draft, errors = validate_row(rows[0])

    assert errors == []
    assert draft.bhk == BHK.TWO
    assert draft.tags == ["vip", "loan"]
    assert draft.budget_max == 200
    assert draft.status == Status.QUALIFIED
