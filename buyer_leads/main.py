"""FastAPI application entrypoint."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI

from buyer_leads.adapters.inbound.http.error_handlers import register_exception_handlers
from buyer_leads.adapters.inbound.http.routes import router
from buyer_leads.infrastructure.logging.logger import logger
from buyer_leads.infrastructure.wiring.container import Container

# Load environment variables from .env file
load_dotenv()


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Pre-built dependencies (tests pass in-memory ones); built from settings if None

    Returns:
        Configured FastAPI application
    """
    container = container or Container()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        container.sweeper.start()
        logger.info("Rate limit sweeper started")
        try:
            yield
        finally:
            await container.sweeper.stop()
            await container.close()
            logger.info("Rate limit sweeper stopped")

    app = FastAPI(
        title="Buyer Leads Service",
        description="Buyer lead management with all-or-nothing bulk import",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.container = container

    register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()
