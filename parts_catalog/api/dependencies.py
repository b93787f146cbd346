"""Request-scoped dependencies built from application state."""

from fastapi import Request

from parts_catalog.services import CatalogStore, CompatibilityResolver, SearchService


def get_store(request: Request) -> CatalogStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Catalog store not initialized. Is the application started?")
    return store


def get_resolver(request: Request) -> CompatibilityResolver:
    return CompatibilityResolver(get_store(request))


def get_search_service(request: Request) -> SearchService:
    store = get_store(request)
    return SearchService(
        store,
        resolver=CompatibilityResolver(store),
        config=request.app.state.search_config,
    )
