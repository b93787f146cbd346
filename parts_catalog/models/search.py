"""Search and compatibility result models."""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from parts_catalog.models.product import Product


@dataclass(frozen=True)
class SearchQuery:
    """Parsed search request: free text, selected categories and page window."""

    query: str = ""
    categories: Tuple[str, ...] = ()
    page: int = 1
    page_size: int = 20

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class Facet:
    """Category label with the number of matching products."""

    name: str
    count: int


@dataclass
class SearchResult:
    """One page of search results with facets and optional code match."""

    products: List[Product]
    total: int
    page: int
    page_size: int
    facets: List[Facet] = field(default_factory=list)
    matched_product: Optional[Product] = None
    compatible_products: List[Product] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)


@dataclass
class CompatibilityReport:
    """Anchor product with its direct and inverse compatibles kept apart."""

    product: Product
    compatibles: List[Product]  # Declared by the anchor
    compatible_with: List[Product]  # Products declaring the anchor
