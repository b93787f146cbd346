"""FastAPI application setup."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from parts_catalog.api.controller import product_router
from parts_catalog.api.exception_handlers import register_exception_handlers
from parts_catalog.clients import CosmosDBClient
from parts_catalog.config import AppConfig, get_config
from parts_catalog.services import CatalogStore
from parts_catalog.services.search_service import DEFAULT_SEARCH_CONFIG

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    store: Optional[CatalogStore] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Application configuration. Loaded with get_config() when
            neither config nor store is given.
        store: Pre-built catalog store. When given, no Cosmos DB connection
            is opened by the application.
    """
    if config is None and store is None:
        config = get_config()

    if config is not None:
        logging.basicConfig(level=config.logging.level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Connect before serving, release on shutdown
        if store is not None:
            yield
            return

        client = CosmosDBClient.from_config(config.cosmosdb)
        await client.connect()
        app.state.store = CatalogStore(
            client, default_provider=config.catalog.default_provider
        )
        try:
            yield
        finally:
            await client.close()

    app = FastAPI(
        title="Parts Catalog API",
        description="Product catalog with faceted search and compatibility resolution",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.search_config = config.search if config is not None else DEFAULT_SEARCH_CONFIG

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins if config is not None else ["*"],
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(product_router)

    @app.get("/")
    async def index() -> dict:
        """Service status and entry points."""
        return {
            "message": "Parts catalog service running",
            "status": "active",
            "routes": {"products": "/products"},
        }

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
