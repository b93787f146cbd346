"""Catalog services module."""

from parts_catalog.services.catalog_store import (
    CatalogStore,
    build_where_clause,
    validate_new_product,
)
from parts_catalog.services.compatibility_service import (
    CompatibilityResolver,
    merge_unique,
)
from parts_catalog.services.exceptions import (
    CatalogError,
    DuplicateProductError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from parts_catalog.services.search_service import SearchService

__all__ = [
    "CatalogError",
    "CatalogStore",
    "CompatibilityResolver",
    "DuplicateProductError",
    "NotFoundError",
    "SearchService",
    "StoreError",
    "ValidationError",
    "build_where_clause",
    "merge_unique",
    "validate_new_product",
]
