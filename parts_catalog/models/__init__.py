"""Data models module."""

from parts_catalog.models.filters import (
    MATCH_ALL,
    UNCATEGORIZED,
    And,
    CategoryIn,
    Filter,
    TextMatch,
    all_of,
    build_filter,
    category_label,
)
from parts_catalog.models.product import CompatibleRef, Product
from parts_catalog.models.search import (
    CompatibilityReport,
    Facet,
    SearchQuery,
    SearchResult,
)

__all__ = [
    "MATCH_ALL",
    "UNCATEGORIZED",
    "And",
    "CategoryIn",
    "CompatibilityReport",
    "CompatibleRef",
    "Facet",
    "Filter",
    "Product",
    "SearchQuery",
    "SearchResult",
    "TextMatch",
    "all_of",
    "build_filter",
    "category_label",
]
