"""Catalog store adapter over the Cosmos DB product container.

Products are stored one document per product with id == code and partition
key /code, so point reads and uniqueness are both keyed by code.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from azure.core.exceptions import AzureError
from azure.cosmos.exceptions import (
    CosmosResourceExistsError,
    CosmosResourceNotFoundError,
)

from parts_catalog.clients import CosmosDBClient
from parts_catalog.models import (
    MATCH_ALL,
    UNCATEGORIZED,
    And,
    CategoryIn,
    CompatibleRef,
    Filter,
    Product,
    TextMatch,
)
from parts_catalog.services.exceptions import (
    DuplicateProductError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Characters Cosmos DB does not allow in document ids
FORBIDDEN_CODE_CHARS = ("/", "\\", "?", "#")


def _field(name: str) -> str:
    # Bracket notation keeps keywords such as "group" usable as property names
    return f'c["{name}"]'


class _Parameters:
    """Collects query parameters and hands out unique names."""

    def __init__(self):
        self.items: List[Dict[str, Any]] = []

    def add(self, value: Any) -> str:
        name = f"@p{len(self.items)}"
        self.items.append({"name": name, "value": value})
        return name


def _translate(expr: Filter, params: _Parameters) -> str:
    if isinstance(expr, TextMatch):
        text = params.add(expr.text)
        matches = [f"CONTAINS({_field(name)}, {text}, true)" for name in expr.fields]
        return "(" + " OR ".join(matches) + ")"

    if isinstance(expr, CategoryIn):
        if not expr.labels:
            return "false"
        # The sentinel stays in the list; a stored type may literally equal it
        labels = params.add(list(expr.labels))
        clauses = [f"ARRAY_CONTAINS({labels}, {_field('type')})"]
        if expr.includes_uncategorized:
            clauses.append(f'(NOT IS_STRING({_field("type")}) OR {_field("type")} = "")')
        return "(" + " OR ".join(clauses) + ")"

    if isinstance(expr, And):
        if not expr.parts:
            return "true"
        return "(" + " AND ".join(_translate(part, params) for part in expr.parts) + ")"

    raise TypeError(f"Unsupported filter expression: {expr!r}")


def build_where_clause(expr: Filter) -> Tuple[str, List[Dict[str, Any]]]:
    """Translate a filter into a Cosmos SQL WHERE clause and its parameters.

    Returns:
        (" WHERE ...", parameters), or ("", []) for a filter matching everything.
    """
    if expr == MATCH_ALL:
        return "", []
    params = _Parameters()
    clause = _translate(expr, params)
    return f" WHERE {clause}", params.items


def validate_new_product(product: Product) -> None:
    """Check required fields before any store write.

    Raises:
        ValidationError: If code or name is missing or empty, or the code
            cannot be used as a document id.
    """
    missing = [
        name for name in ("code", "name")
        if not isinstance(getattr(product, name), str) or not getattr(product, name).strip()
    ]
    if missing:
        raise ValidationError(
            f"Missing required fields ({', '.join(missing)})",
            field=missing[0],
        )
    if any(char in product.code for char in FORBIDDEN_CODE_CHARS):
        raise ValidationError(
            f"Product code '{product.code}' contains a forbidden character "
            f"({' '.join(FORBIDDEN_CODE_CHARS)})",
            field="code",
        )


class CatalogStore:
    """Typed query primitives over the product container."""

    def __init__(self, client: CosmosDBClient, default_provider: str = "Provider"):
        """Initialize the store adapter.

        Args:
            client: Connected Cosmos DB client for the product container.
            default_provider: Provider stored when a new product has none.
        """
        self._client = client
        self._default_provider = default_provider

    async def _query(
        self,
        query: str,
        parameters: Optional[List[Dict[str, Any]]] = None,
    ) -> List[Any]:
        try:
            return await self._client.query_items(query=query, parameters=parameters or None)
        except AzureError as e:
            raise StoreError("Catalog query failed", detail=str(e)) from e

    async def _query_products(
        self,
        query: str,
        parameters: Optional[List[Dict[str, Any]]] = None,
    ) -> List[Product]:
        return [Product.from_document(doc) for doc in await self._query(query, parameters)]

    async def find_by_code(self, code: str) -> Optional[Product]:
        """Exact, case-sensitive lookup by code."""
        if not code or any(char in code for char in FORBIDDEN_CODE_CHARS):
            return None
        try:
            document = await self._client.read_item(item_id=code, partition_key=code)
        except CosmosResourceNotFoundError:
            return None
        except AzureError as e:
            raise StoreError("Catalog lookup failed", detail=str(e)) from e
        return Product.from_document(document)

    async def find_by_code_case_insensitive(self, code: str) -> Optional[Product]:
        """Lookup where the whole stored code equals code, ignoring case."""
        if not code:
            return None
        products = await self._query_products(
            f"SELECT * FROM c WHERE STRINGEQUALS({_field('code')}, @code, true)",
            [{"name": "@code", "value": code}],
        )
        return products[0] if products else None

    async def find_many(self, expr: Filter, skip: int, limit: int) -> List[Product]:
        """Fetch one window of products matching the filter, in store order."""
        where, params = build_where_clause(expr)
        params = params + [
            {"name": "@skip", "value": skip},
            {"name": "@limit", "value": limit},
        ]
        return await self._query_products(
            f"SELECT * FROM c{where} OFFSET @skip LIMIT @limit", params
        )

    async def find_all(self) -> List[Product]:
        return await self._query_products("SELECT * FROM c")

    async def count(self, expr: Filter) -> int:
        where, params = build_where_clause(expr)
        result = await self._query(f"SELECT VALUE COUNT(1) FROM c{where}", params)
        return int(result[0]) if result else 0

    async def distinct_types(self, expr: Filter = MATCH_ALL) -> List[str]:
        """Category labels present among matching products.

        Products without a type are reported under UNCATEGORIZED.
        """
        where, params = build_where_clause(expr)
        params = params + [{"name": "@uncategorized", "value": UNCATEGORIZED}]
        type_field = _field("type")
        labels = await self._query(
            f"SELECT DISTINCT VALUE IIF(IS_STRING({type_field}) AND {type_field} != \"\", "
            f"{type_field}, @uncategorized) FROM c{where}",
            params,
        )
        return list(dict.fromkeys(labels))

    async def find_by_codes(self, codes: Iterable[str]) -> List[Product]:
        """Products whose code is in codes. No query is issued for an empty set."""
        unique_codes = list(dict.fromkeys(codes))
        if not unique_codes:
            return []
        return await self._query_products(
            f"SELECT * FROM c WHERE ARRAY_CONTAINS(@codes, {_field('code')})",
            [{"name": "@codes", "value": unique_codes}],
        )

    async def find_referencing(self, code: str) -> List[Product]:
        """Products whose compatibles contain an entry with the given code."""
        return await self._query_products(
            "SELECT * FROM c WHERE EXISTS("
            f"SELECT VALUE r FROM r IN {_field('compatibles')} WHERE r[\"code\"] = @code)",
            [{"name": "@code", "value": code}],
        )

    async def create(self, product: Product) -> Product:
        """Persist a new product.

        Raises:
            ValidationError: If code or name is missing; nothing is written.
            DuplicateProductError: If the code already exists.
            StoreError: If the store write fails.
        """
        validate_new_product(product)
        if not product.provider:
            product.provider = self._default_provider
        if product.compatibles is None:
            product.compatibles = []

        try:
            created = await self._client.create_item(product.to_document())
        except CosmosResourceExistsError as e:
            raise DuplicateProductError(product.code) from e
        except AzureError as e:
            raise StoreError("Catalog write failed", detail=str(e)) from e

        logger.info(f"Created product {product.code}")
        return Product.from_document(created)

    async def replace_compatibles(
        self,
        code: str,
        compatibles: List[CompatibleRef],
    ) -> Optional[Product]:
        """Replace the whole compatibles list of a product.

        Returns:
            The updated product, or None if no product has that code.
        """
        if not code or any(char in code for char in FORBIDDEN_CODE_CHARS):
            return None
        operations = [{
            "op": "set",
            "path": "/compatibles",
            "value": [{"type": ref.type, "code": ref.code} for ref in compatibles],
        }]
        try:
            updated = await self._client.patch_item(
                item_id=code, partition_key=code, operations=operations
            )
        except CosmosResourceNotFoundError:
            return None
        except AzureError as e:
            raise StoreError("Catalog update failed", detail=str(e)) from e

        logger.info(f"Replaced compatibles of {code} ({len(compatibles)} entries)")
        return Product.from_document(updated)
