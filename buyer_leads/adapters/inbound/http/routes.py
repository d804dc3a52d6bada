"""HTTP routes."""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from fastapi import APIRouter, Body, Depends, File, Query, Request, UploadFile, status
from fastapi.responses import StreamingResponse
from pydantic import ValidationError as PydanticValidationError

from buyer_leads.adapters.inbound.http.dependencies import (
    get_actor_context,
    get_client_origin,
    get_container,
)
from buyer_leads.application.dtos.buyer import (
    BuyerDetailResponse,
    BuyerFilters,
    BuyerListResponse,
    BuyerResponse,
    SortField,
    SortOrder,
)
from buyer_leads.application.dtos.imports import ImportBuyersRequest, ImportResult
from buyer_leads.application.services.csv_codec import parse_buyer_csv
from buyer_leads.domain.enums import City, PropertyType, Status, Timeline
from buyer_leads.domain.errors import FieldError, ValidationError
from buyer_leads.domain.value_objects.actor_context import ActorContext
from buyer_leads.infrastructure.logging.logger import log_event
from buyer_leads.infrastructure.wiring.container import Container

router = APIRouter()


def _filters(
    city: Optional[City] = Query(None),
    property_type: Optional[PropertyType] = Query(None, alias="propertyType"),
    status_: Optional[Status] = Query(None, alias="status"),
    timeline: Optional[Timeline] = Query(None),
    search: Optional[str] = Query(None),
    sort: SortField = Query("updatedAt"),
    order: SortOrder = Query("desc"),
) -> BuyerFilters:
    return BuyerFilters(
        city=city,
        property_type=property_type,
        status=status_,
        timeline=timeline,
        search=search.strip() if search and search.strip() else None,
        sort=sort,
        order=order,
    )


def _import_response(result: ImportResult) -> dict[str, Any]:
    return {
        "message": f"Successfully imported {result.imported_count} buyers",
        **result.model_dump(by_alias=True),
    }


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """
    Health check endpoint for liveness/readiness.

    Returns:
        Health status
    """
    return {"status": "ok"}


@router.post("/buyers", status_code=status.HTTP_201_CREATED, response_model=BuyerResponse)
async def create_buyer(
    request: Request,
    row: Any = Body(...),
    actor: ActorContext = Depends(get_actor_context),
    container: Container = Depends(get_container),
) -> BuyerResponse:
    """
    Create a single buyer lead.

    Args:
        request: FastAPI request object (for the caller origin)
        row: Buyer fields in the same shape as an import row
        actor: Acting identity, becomes the owner

    Returns:
        The created lead
    """
    request_id = str(uuid4())
    origin = get_client_origin(request)
    log_event(request_id=request_id, component="http", route="create", actor_id=actor.actor_id)

    lead = await container.create_buyer.execute(actor, row, origin, request_id=request_id)
    return BuyerResponse.from_entity(lead)


@router.get("/buyers", response_model=BuyerListResponse)
async def list_buyers(
    filters: BuyerFilters = Depends(_filters),
    page: int = Query(1),
    container: Container = Depends(get_container),
) -> BuyerListResponse:
    """
    List buyer leads, ten per page, most recently updated first.

    Returns:
        Page of leads with pagination metadata
    """
    # Listing is always newest first regardless of the sort parameters
    filters = filters.model_copy(update={"sort": "updatedAt", "order": "desc"})
    return await container.list_buyers.execute(filters, page=page)


@router.get("/buyers/export")
async def export_buyers(
    filters: BuyerFilters = Depends(_filters),
    actor: ActorContext = Depends(get_actor_context),
    container: Container = Depends(get_container),
) -> StreamingResponse:
    """
    Download matching leads as CSV.

    Returns:
        text/csv attachment named buyer-leads-YYYY-MM-DD.csv
    """
    request_id = str(uuid4())
    log_event(request_id=request_id, component="http", route="export", actor_id=actor.actor_id)

    chunks = await container.export_buyers.execute(actor, filters, request_id=request_id)
    filename = f"buyer-leads-{datetime.now(timezone.utc).date().isoformat()}.csv"
    return StreamingResponse(
        chunks,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/buyers/import")
async def import_buyers(
    body: Any = Body(None),
    actor: ActorContext = Depends(get_actor_context),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    """
    Import a batch of buyer rows all-or-nothing.

    Args:
        body: Request body with the rows under "data"

    Returns:
        Confirmation message and number of imported leads

    Raises:
        ValidationError: If the body is not an object with a "data" array
    """
    request_id = str(uuid4())
    try:
        payload = ImportBuyersRequest.model_validate(body)
    except PydanticValidationError as err:
        raise ValidationError(
            [FieldError("data", "Expected an object with a data array of rows")]
        ) from err

    log_event(
        request_id=request_id,
        component="http",
        route="import",
        actor_id=actor.actor_id,
        row_count=len(payload.data),
    )

    result = await container.import_buyers.execute(actor, payload.data, request_id=request_id)
    return _import_response(result)


@router.post("/buyers/import/csv")
async def import_buyers_csv(
    file: UploadFile = File(...),
    actor: ActorContext = Depends(get_actor_context),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    """
    Import buyer rows from an uploaded CSV file.

    The header row names the fields; responses match the JSON import.
    """
    request_id = str(uuid4())
    raw = await file.read()
    try:
        rows = parse_buyer_csv(raw.decode("utf-8"))
    except UnicodeDecodeError as err:
        raise ValidationError([FieldError("file", "File must be UTF-8 encoded")]) from err
    except ValueError as err:
        raise ValidationError([FieldError("file", str(err))]) from err

    log_event(
        request_id=request_id,
        component="http",
        route="import_csv",
        actor_id=actor.actor_id,
        filename=file.filename,
        row_count=len(rows),
    )

    result = await container.import_buyers.execute(actor, rows, request_id=request_id)
    return _import_response(result)


@router.get("/buyers/{lead_id}", response_model=BuyerDetailResponse)
async def get_buyer(
    lead_id: str,
    container: Container = Depends(get_container),
) -> BuyerDetailResponse:
    """
    Get a lead with its owner and most recent history entries.

    Args:
        lead_id: Lead identifier

    Returns:
        Lead detail
    """
    return await container.get_buyer_detail.execute(lead_id)


@router.put("/buyers/{lead_id}", response_model=BuyerResponse)
async def update_buyer(
    lead_id: str,
    row: Any = Body(...),
    actor: ActorContext = Depends(get_actor_context),
    container: Container = Depends(get_container),
) -> BuyerResponse:
    """
    Replace a lead's fields with a fully re-validated row.

    Args:
        lead_id: Lead identifier
        row: Buyer fields in the same shape as create

    Returns:
        The updated lead
    """
    request_id = str(uuid4())
    log_event(
        request_id=request_id,
        component="http",
        route="update",
        actor_id=actor.actor_id,
        buyer_id=lead_id,
    )

    lead = await container.update_buyer.execute(actor, lead_id, row, request_id=request_id)
    return BuyerResponse.from_entity(lead)


@router.delete("/buyers/{lead_id}")
async def delete_buyer(
    lead_id: str,
    actor: ActorContext = Depends(get_actor_context),
    container: Container = Depends(get_container),
) -> dict[str, str]:
    """
    Delete a lead and its history. Only the owner may delete.

    Args:
        lead_id: Lead identifier

    Returns:
        Confirmation message
    """
    request_id = str(uuid4())
    log_event(
        request_id=request_id,
        component="http",
        route="delete",
        actor_id=actor.actor_id,
        buyer_id=lead_id,
    )

    await container.delete_buyer.execute(actor, lead_id, request_id=request_id)
    return {"message": "Buyer deleted"}
