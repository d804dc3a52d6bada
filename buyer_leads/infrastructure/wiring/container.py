"""Dependency injection container."""

from typing import Optional

from buyer_leads.application.ports.buyer_repository import BuyerRepository
from buyer_leads.application.ports.rate_limiter import RateLimiter
from buyer_leads.application.services.audit_recorder import AuditRecorder
from buyer_leads.application.use_cases.create_buyer_use_case import CreateBuyerUseCase
from buyer_leads.application.use_cases.delete_buyer_use_case import DeleteBuyerUseCase
from buyer_leads.application.use_cases.export_buyers_use_case import ExportBuyersUseCase
from buyer_leads.application.use_cases.get_buyer_detail_use_case import GetBuyerDetailUseCase
from buyer_leads.application.use_cases.import_buyers_use_case import ImportBuyersUseCase
from buyer_leads.application.use_cases.list_buyers_use_case import ListBuyersUseCase
from buyer_leads.application.use_cases.update_buyer_use_case import UpdateBuyerUseCase
from buyer_leads.infrastructure.config.settings import settings
from buyer_leads.infrastructure.tasks.rate_limit_sweeper import RateLimitSweeper
from buyer_leads.infrastructure.wiring.dependencies import (
    create_buyer_repository,
    create_create_rate_limiter,
    create_import_rate_limiter,
)


class Container:
    """Dependency injection container."""

    def __init__(
        self,
        repository: Optional[BuyerRepository] = None,
        import_rate_limiter: Optional[RateLimiter] = None,
        create_rate_limiter: Optional[RateLimiter] = None,
        audit_recorder: Optional[AuditRecorder] = None,
    ) -> None:
        """
        Initialize container with dependencies.

        Any dependency left out is built from settings.
        """
        # Buyer repository
        self._repository = repository or create_buyer_repository()

        # Rate limiters: per actor for import, per network origin for single create
        self._import_rate_limiter = import_rate_limiter or create_import_rate_limiter()
        self._create_rate_limiter = create_rate_limiter or create_create_rate_limiter()

        self._audit_recorder = audit_recorder or AuditRecorder()

        # Use cases
        self._import_buyers = ImportBuyersUseCase(
            self._repository,
            self._import_rate_limiter,
            self._audit_recorder,
            max_rows=settings.max_import_rows,
        )
        self._create_buyer = CreateBuyerUseCase(
            self._repository, self._create_rate_limiter, self._audit_recorder
        )
        self._update_buyer = UpdateBuyerUseCase(self._repository, self._audit_recorder)
        self._delete_buyer = DeleteBuyerUseCase(self._repository)
        self._list_buyers = ListBuyersUseCase(self._repository, page_size=settings.page_size)
        self._get_buyer_detail = GetBuyerDetailUseCase(
            self._repository, history_limit=settings.history_preview_limit
        )
        self._export_buyers = ExportBuyersUseCase(self._repository)

        # Housekeeping for expired rate limit windows
        self._sweeper = RateLimitSweeper(
            {"import": self._import_rate_limiter, "create": self._create_rate_limiter},
            interval_seconds=settings.rate_limit_sweep_interval_seconds,
        )

    @property
    def repository(self) -> BuyerRepository:
        """Get buyer repository."""
        return self._repository

    @property
    def import_buyers(self) -> ImportBuyersUseCase:
        """Get batch import use case."""
        return self._import_buyers

    @property
    def create_buyer(self) -> CreateBuyerUseCase:
        """Get create use case."""
        return self._create_buyer

    @property
    def update_buyer(self) -> UpdateBuyerUseCase:
        """Get update use case."""
        return self._update_buyer

    @property
    def delete_buyer(self) -> DeleteBuyerUseCase:
        """Get delete use case."""
        return self._delete_buyer

    @property
    def list_buyers(self) -> ListBuyersUseCase:
        """Get list use case."""
        return self._list_buyers

    @property
    def get_buyer_detail(self) -> GetBuyerDetailUseCase:
        """Get detail use case."""
        return self._get_buyer_detail

    @property
    def export_buyers(self) -> ExportBuyersUseCase:
        """Get export use case."""
        return self._export_buyers

    @property
    def sweeper(self) -> RateLimitSweeper:
        """Get rate limit sweeper."""
        return self._sweeper

    async def close(self) -> None:
        """Release connections held by rate limiter adapters."""
        for limiter in (self._import_rate_limiter, self._create_rate_limiter):
            close = getattr(limiter, "close", None)
            if close is not None:
                await close()
