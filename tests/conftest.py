"""Shared fixtures: an in-memory catalog store and a sample catalog."""

import copy
from typing import Iterable, List, Optional

import pytest
from fastapi.testclient import TestClient

from parts_catalog.api import create_app
from parts_catalog.models import (
    MATCH_ALL,
    And,
    CategoryIn,
    CompatibleRef,
    Filter,
    Product,
    TextMatch,
    category_label,
)
from parts_catalog.services import (
    CatalogStore,
    CompatibilityResolver,
    DuplicateProductError,
    SearchService,
    validate_new_product,
)


def matches(product: Product, expr: Filter) -> bool:
    """Evaluate a filter expression against a product in memory."""
    if isinstance(expr, TextMatch):
        needle = expr.text.lower()
        return any(needle in (getattr(product, name) or "").lower() for name in expr.fields)
    if isinstance(expr, CategoryIn):
        return category_label(product.type) in expr.labels
    if isinstance(expr, And):
        return all(matches(product, part) for part in expr.parts)
    raise TypeError(expr)


class InMemoryCatalogStore(CatalogStore):
    """CatalogStore keeping products in a dict, in insertion order.

    Records the name of every store call in `calls`.
    """

    def __init__(self, products: Iterable[Product] = (), default_provider: str = "Provider"):
        self._default_provider = default_provider
        self._products = {p.code: copy.deepcopy(p) for p in products}
        self.calls: List[str] = []

    def _snapshot(self, products: Iterable[Product]) -> List[Product]:
        return [copy.deepcopy(p) for p in products]

    async def find_by_code(self, code: str) -> Optional[Product]:
        self.calls.append("find_by_code")
        product = self._products.get(code)
        return copy.deepcopy(product) if product else None

    async def find_by_code_case_insensitive(self, code: str) -> Optional[Product]:
        self.calls.append("find_by_code_case_insensitive")
        for product in self._products.values():
            if product.code.lower() == code.lower():
                return copy.deepcopy(product)
        return None

    async def find_many(self, expr: Filter, skip: int, limit: int) -> List[Product]:
        self.calls.append("find_many")
        found = [p for p in self._products.values() if matches(p, expr)]
        return self._snapshot(found[skip:skip + limit])

    async def find_all(self) -> List[Product]:
        self.calls.append("find_all")
        return self._snapshot(self._products.values())

    async def count(self, expr: Filter) -> int:
        self.calls.append("count")
        return sum(1 for p in self._products.values() if matches(p, expr))

    async def distinct_types(self, expr: Filter = MATCH_ALL) -> List[str]:
        self.calls.append("distinct_types")
        labels = [category_label(p.type) for p in self._products.values() if matches(p, expr)]
        return list(dict.fromkeys(labels))

    async def find_by_codes(self, codes: Iterable[str]) -> List[Product]:
        wanted = set(codes)
        if not wanted:
            return []
        self.calls.append("find_by_codes")
        return self._snapshot(p for p in self._products.values() if p.code in wanted)

    async def find_referencing(self, code: str) -> List[Product]:
        self.calls.append("find_referencing")
        return self._snapshot(
            p for p in self._products.values() if code in p.compatible_codes
        )

    async def create(self, product: Product) -> Product:
        self.calls.append("create")
        validate_new_product(product)
        if product.code in self._products:
            raise DuplicateProductError(product.code)
        if not product.provider:
            product.provider = self._default_provider
        self._products[product.code] = copy.deepcopy(product)
        return copy.deepcopy(product)

    async def replace_compatibles(
        self, code: str, compatibles: List[CompatibleRef]
    ) -> Optional[Product]:
        self.calls.append("replace_compatibles")
        product = self._products.get(code)
        if product is None:
            return None
        product.compatibles = list(compatibles)
        return copy.deepcopy(product)


def make_product(code: str, name: str = None, type: str = None, compatibles=(), **fields) -> Product:
    return Product(
        code=code,
        name=name or f"Product {code}",
        type=type,
        compatibles=[CompatibleRef(type=t, code=c) for c, t in compatibles],
        **fields,
    )


@pytest.fixture
def sample_products() -> List[Product]:
    """Mounts referencing bases, plus uncategorized and dangling entries."""
    return [
        make_product("YA25", "Plate", "Mount", [("BB10", "Base")], brand="Acme"),
        make_product("BB10", "Base", "Base"),
        make_product("YA30", "Plate XL", "Mount", [("BB10", "Base"), ("ZZ99", "Ghost")], brand="Acme"),
        make_product("CL01", "Clamp", "Clamp", [("YA25", "Mount"), ("CL01", "Self")], brand="Bolt"),
        make_product("SC05", "Screw set", None, brand="Acme"),
        make_product("BB20", "Base plate", "Base", brand="Bolt"),
    ]


@pytest.fixture
def store(sample_products) -> InMemoryCatalogStore:
    return InMemoryCatalogStore(sample_products)


@pytest.fixture
def resolver(store) -> CompatibilityResolver:
    return CompatibilityResolver(store)


@pytest.fixture
def search_service(store, resolver) -> SearchService:
    return SearchService(store, resolver=resolver)


@pytest.fixture
def client(store) -> TestClient:
    """API client over the in-memory store; no Cosmos DB connection is made."""
    return TestClient(create_app(store=store))
