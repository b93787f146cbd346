"""Faceted catalog search with pagination and exact code detection."""

import asyncio
import logging
from typing import List, Optional, Tuple

from parts_catalog.config import SearchConfig
from parts_catalog.models import (
    MATCH_ALL,
    CategoryIn,
    Facet,
    Filter,
    Product,
    SearchQuery,
    SearchResult,
    all_of,
    build_filter,
)
from parts_catalog.services.catalog_store import CatalogStore
from parts_catalog.services.compatibility_service import CompatibilityResolver
from parts_catalog.services.exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_CONFIG = SearchConfig(
    default_page_size=20,
    max_page_size=100,
    narrow_facets_to_selection=False,
)


class SearchService:
    """Builds filters, pages results and counts category facets."""

    def __init__(
        self,
        store: CatalogStore,
        resolver: Optional[CompatibilityResolver] = None,
        config: SearchConfig = DEFAULT_SEARCH_CONFIG,
    ):
        self._store = store
        self._resolver = resolver or CompatibilityResolver(store)
        self._config = config

    @property
    def default_page_size(self) -> int:
        return self._config.default_page_size

    def _validate(self, request: SearchQuery) -> None:
        if request.page < 1:
            raise ValidationError(
                f"page must be a positive integer, got {request.page}", field="page"
            )
        if request.page_size < 1:
            raise ValidationError(
                f"pageSize must be a positive integer, got {request.page_size}",
                field="pageSize",
            )
        if request.page_size > self._config.max_page_size:
            raise ValidationError(
                f"pageSize cannot exceed {self._config.max_page_size}",
                field="pageSize",
            )

    async def search(self, request: SearchQuery) -> SearchResult:
        """Run a faceted search.

        Args:
            request: Query text, selected categories and page window.

        Returns:
            SearchResult with the page, total, facets and, when the query is a
            product code, the matched product and its merged compatibles.

        Raises:
            ValidationError: If page or page size is out of range.
            StoreError: If the store fails.
        """
        self._validate(request)
        query = request.query.strip()
        base_filter = build_filter(query, request.categories)

        (products, total), facets, (matched, compatibles) = await asyncio.gather(
            self._fetch_page(base_filter, request.skip, request.page_size),
            self.facets(query, request.categories),
            self._match_code(query),
        )

        logger.debug(
            f"Search query={query!r} categories={list(request.categories)} "
            f"page={request.page} total={total}"
        )
        return SearchResult(
            products=products,
            total=total,
            page=request.page,
            page_size=request.page_size,
            facets=facets,
            matched_product=matched,
            compatible_products=compatibles,
        )

    async def _fetch_page(
        self, expr: Filter, skip: int, limit: int
    ) -> Tuple[List[Product], int]:
        products, total = await asyncio.gather(
            self._store.find_many(expr, skip, limit),
            self._store.count(expr),
        )
        return products, total

    def facet_filter(self, query: str, categories=()) -> Filter:
        """Filter that facet labels and counts are computed against.

        Without a text query facets cover the whole catalog. With one, the
        category selection is left out unless narrowing is configured.
        """
        if not query:
            return MATCH_ALL
        if self._config.narrow_facets_to_selection:
            return build_filter(query, categories)
        return build_filter(query)

    async def facets(self, query: str, categories=()) -> List[Facet]:
        """Category labels with their product counts."""
        scope = self.facet_filter(query, categories)
        labels = await self._store.distinct_types(scope)
        counts = await asyncio.gather(
            *(self._store.count(all_of(scope, CategoryIn((label,)))) for label in labels)
        )
        return [Facet(name=label, count=count) for label, count in zip(labels, counts)]

    async def _match_code(self, query: str) -> Tuple[Optional[Product], List[Product]]:
        if not query:
            return None, []
        matched = await self._resolver.find_anchor(query, ignore_case=True)
        if matched is None:
            return None, []
        return matched, await self._resolver.merged(matched)
