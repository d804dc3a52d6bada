"""Postgres-backed buyer repository adapter."""

from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Optional, TypeVar

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from buyer_leads.application.dtos.buyer import SORT_ATTRIBUTES, BuyerFilters
from buyer_leads.application.ports.buyer_repository import BuyerRepository
from buyer_leads.domain.entities.buyer_history import BuyerHistory
from buyer_leads.domain.entities.buyer_lead import BuyerLead
from buyer_leads.domain.errors import NotFoundError, PersistenceError
from buyer_leads.infrastructure.db import get_db_session
from buyer_leads.infrastructure.logging.logger import logger

from .models import BuyerHistoryModel, BuyerModel

T = TypeVar("T")

_LEAD_COLUMNS = (
    "full_name",
    "email",
    "phone",
    "city",
    "property_type",
    "bhk",
    "purpose",
    "budget_min",
    "budget_max",
    "timeline",
    "source",
    "notes",
    "tags",
    "status",
)


def _aware(value: datetime) -> datetime:
    # SQLite returns naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PostgresBuyerRepository(BuyerRepository):
    """Postgres implementation of buyer repository."""

    def __init__(self, session: Optional[Session] = None) -> None:
        """
        Initialize Postgres repository.

        Args:
            session: Session of an enclosing atomic unit. When given, writes are
                flushed but never committed here.
        """
        self._session = session

    @contextmanager
    def _session_scope(self, operation: str) -> Iterator[Session]:
        """
        Provide a session for one operation.

        Inside an atomic unit the unit's session is reused and errors propagate to
        run_atomic; otherwise a fresh session is committed or rolled back here.
        """
        if self._session is not None:
            yield self._session
            return

        db: Session = get_db_session()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error while {operation}: {str(e)}")
            raise PersistenceError(f"Database error while {operation}") from e
        finally:
            db.close()

    def _model_to_entity(self, model: BuyerModel) -> BuyerLead:
        """
        Convert BuyerModel to BuyerLead entity.

        Args:
            model: SQLAlchemy model instance

        Returns:
            BuyerLead entity
        """
        return BuyerLead(
            id=model.id,
            owner_id=model.owner_id,
            full_name=model.full_name,
            email=model.email,
            phone=model.phone,
            city=model.city,
            property_type=model.property_type,
            bhk=model.bhk,
            purpose=model.purpose,
            budget_min=model.budget_min,
            budget_max=model.budget_max,
            timeline=model.timeline,
            source=model.source,
            notes=model.notes,
            tags=list(model.tags) if model.tags is not None else None,
            status=model.status,
            created_at=_aware(model.created_at),
            updated_at=_aware(model.updated_at),
        )

    def _history_to_entity(self, model: BuyerHistoryModel) -> BuyerHistory:
        return BuyerHistory(
            id=model.id,
            buyer_id=model.buyer_id,
            changed_by=model.changed_by,
            changed_at=_aware(model.changed_at),
            diff=dict(model.diff),
        )

    def _apply_entity(self, model: BuyerModel, lead: BuyerLead) -> None:
        for column in _LEAD_COLUMNS:
            setattr(model, column, getattr(lead, column))
        model.updated_at = lead.updated_at

    async def insert(self, lead: BuyerLead) -> str:
        """
        Insert a new lead.

        Args:
            lead: Lead to insert

        Returns:
            Id of the inserted lead
        """
        with self._session_scope(f"inserting buyer {lead.id}") as db:
            model = BuyerModel(id=lead.id, owner_id=lead.owner_id, created_at=lead.created_at)
            self._apply_entity(model, lead)
            db.add(model)
            db.flush()
        return lead.id

    async def update(self, lead_id: str, patch: dict[str, Any]) -> BuyerLead:
        """
        Apply a patch to an existing lead.

        Args:
            lead_id: Lead identifier
            patch: Mapping of attribute name to new value

        Returns:
            The updated lead
        """
        with self._session_scope(f"updating buyer {lead_id}") as db:
            model = db.get(BuyerModel, lead_id)
            if model is None:
                raise NotFoundError("Buyer not found")
            updated = self._model_to_entity(model).patched(patch, datetime.now(timezone.utc))
            self._apply_entity(model, updated)
            db.flush()
        return updated

    async def find(self, lead_id: str) -> Optional[BuyerLead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier

        Returns:
            Lead, or None if not found
        """
        with self._session_scope(f"getting buyer {lead_id}") as db:
            model = db.get(BuyerModel, lead_id)
            return self._model_to_entity(model) if model is not None else None

    async def delete(self, lead_id: str) -> None:
        """
        Delete a lead and its history.

        Args:
            lead_id: Lead identifier
        """
        with self._session_scope(f"deleting buyer {lead_id}") as db:
            db.query(BuyerHistoryModel).filter(BuyerHistoryModel.buyer_id == lead_id).delete(
                synchronize_session=False
            )
            db.query(BuyerModel).filter(BuyerModel.id == lead_id).delete(synchronize_session=False)

    async def append_history(self, entry: BuyerHistory) -> None:
        """
        Append an audit entry.

        Args:
            entry: History entry to store
        """
        with self._session_scope(f"appending history for buyer {entry.buyer_id}") as db:
            db.add(
                BuyerHistoryModel(
                    id=entry.id,
                    buyer_id=entry.buyer_id,
                    changed_by=entry.changed_by,
                    changed_at=entry.changed_at,
                    diff=entry.diff,
                )
            )
            db.flush()

    async def list_history(self, buyer_id: str, limit: Optional[int] = None) -> list[BuyerHistory]:
        """
        List history entries of a lead, newest first.

        Args:
            buyer_id: Lead identifier
            limit: Maximum number of entries, or None for all

        Returns:
            History entries ordered by changed_at descending, then id descending
        """
        with self._session_scope(f"listing history for buyer {buyer_id}") as db:
            query = (
                db.query(BuyerHistoryModel)
                .filter(BuyerHistoryModel.buyer_id == buyer_id)
                .order_by(BuyerHistoryModel.changed_at.desc(), BuyerHistoryModel.id.desc())
            )
            if limit is not None:
                query = query.limit(limit)
            return [self._history_to_entity(model) for model in query.all()]

    async def search(
        self, filters: BuyerFilters, offset: int = 0, limit: Optional[int] = None
    ) -> tuple[list[BuyerLead], int]:
        """
        Search leads matching the filters.

        Args:
            filters: Equality filters, free-text search and ordering
            offset: Number of matching leads to skip
            limit: Maximum number of leads to return, or None for all

        Returns:
            Tuple of (page of leads, total number of matching leads)
        """
        with self._session_scope("searching buyers") as db:
            query = db.query(BuyerModel)
            if filters.city is not None:
                query = query.filter(BuyerModel.city == filters.city)
            if filters.property_type is not None:
                query = query.filter(BuyerModel.property_type == filters.property_type)
            if filters.status is not None:
                query = query.filter(BuyerModel.status == filters.status)
            if filters.timeline is not None:
                query = query.filter(BuyerModel.timeline == filters.timeline)
            if filters.search:
                pattern = f"%{filters.search}%"
                query = query.filter(
                    or_(
                        BuyerModel.full_name.ilike(pattern),
                        BuyerModel.email.ilike(pattern),
                        BuyerModel.phone.ilike(pattern),
                    )
                )

            total = query.count()

            sort_column = getattr(BuyerModel, SORT_ATTRIBUTES[filters.sort])
            ordering = sort_column.desc() if filters.order == "desc" else sort_column.asc()
            query = query.order_by(ordering, BuyerModel.id).offset(offset)
            if limit is not None:
                query = query.limit(limit)
            return [self._model_to_entity(model) for model in query.all()], total

    async def run_atomic(self, work: Callable[[BuyerRepository], Awaitable[T]]) -> T:
        """
        Run work inside one database transaction.

        Args:
            work: Coroutine function performing the writes

        Returns:
            Whatever the work returns
        """
        db: Session = get_db_session()
        try:
            result = await work(PostgresBuyerRepository(session=db))
            db.commit()
            return result
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error in atomic unit, rolled back: {str(e)}")
            raise PersistenceError("Database error, changes rolled back") from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
