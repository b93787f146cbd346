"""Typed filter expressions for catalog queries.

A filter is one of TextMatch, CategoryIn or And. The store adapter translates
it into its own query language; nothing else inspects its structure.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

# Category label for products without a type
UNCATEGORIZED = "Uncategorized"

TEXT_FIELDS = ("name", "code", "brand")


def category_label(value: Optional[str]) -> str:
    """Return the facet label for a product type, mapping blanks to UNCATEGORIZED."""
    return value if value else UNCATEGORIZED


@dataclass(frozen=True)
class TextMatch:
    """Case-insensitive substring match on any of the given fields."""

    text: str
    fields: Tuple[str, ...] = TEXT_FIELDS


@dataclass(frozen=True)
class CategoryIn:
    """Product type is one of the labels. UNCATEGORIZED also matches blank types."""

    labels: Tuple[str, ...]

    @property
    def includes_uncategorized(self) -> bool:
        return UNCATEGORIZED in self.labels


@dataclass(frozen=True)
class And:
    """Conjunction of filters. An empty conjunction matches every product."""

    parts: Tuple["Filter", ...] = ()


Filter = Union[TextMatch, CategoryIn, And]

MATCH_ALL = And()


def all_of(*filters: Filter) -> Filter:
    """Combine filters, flattening nested conjunctions and dropping MATCH_ALL."""
    parts = []
    for f in filters:
        if isinstance(f, And):
            parts.extend(f.parts)
        else:
            parts.append(f)
    if len(parts) == 1:
        return parts[0]
    return And(tuple(parts))


def build_filter(query: str = "", categories: Iterable[str] = ()) -> Filter:
    """Build the base search filter from free text and selected categories."""
    parts = []
    if query:
        parts.append(TextMatch(query))
    labels = tuple(dict.fromkeys(categories))
    if labels:
        parts.append(CategoryIn(labels))
    return all_of(*parts)
