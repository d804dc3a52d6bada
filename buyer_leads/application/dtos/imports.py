"""Batch import DTOs."""

from typing import Any

from pydantic import ConfigDict

from buyer_leads.application.dtos.base import DTO, CamelDTO


class ImportBuyersRequest(DTO):
    """Batch import request body."""

    data: list[Any]

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "data": [
                    {
                        "fullName": "Aarav Sharma",
                        "phone": "9876543210",
                        "city": "Mohali",
                        "propertyType": "Apartment",
                        "bhk": "2",
                        "purpose": "Buy",
                        "budgetMin": "5000000",
                        "budgetMax": "7500000",
                        "timeline": "ZeroToThreeMonths",
                        "source": "Website",
                        "tags": "first-home, loan",
                    }
                ]
            }
        },
    )


class ImportResult(CamelDTO):
    """Outcome of a committed batch import."""

    imported_count: int
