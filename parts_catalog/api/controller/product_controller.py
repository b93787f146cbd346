"""REST controller for catalog products, search and compatibility."""

from typing import List

from fastapi import APIRouter, Body, Depends, Query, status

from parts_catalog.api.dependencies import get_resolver, get_search_service, get_store
from parts_catalog.api.schemas import (
    CompatibilityReportResponse,
    CompatiblesPayload,
    ProductCreate,
    ProductListResponse,
    ProductSchema,
    SearchRequest,
    SearchResponse,
)
from parts_catalog.services import (
    CatalogStore,
    CompatibilityResolver,
    NotFoundError,
    SearchService,
)

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=ProductSchema, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    store: CatalogStore = Depends(get_store),
) -> ProductSchema:
    """Create a product. code and name are required; compatibles default to []."""
    created = await store.create(payload.to_product())
    return ProductSchema.from_product(created)


@router.post("/search", response_model=SearchResponse)
async def search_products(
    payload: SearchRequest,
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Faceted search by free text and categories.

    When the query is a product code, the response also carries the matched
    product and its merged direct and inverse compatibles.
    """
    result = await search_service.search(payload.to_query(search_service.default_page_size))
    return SearchResponse.from_result(result)


@router.get("", response_model=ProductListResponse)
async def list_products(store: CatalogStore = Depends(get_store)) -> ProductListResponse:
    """List every product, unfiltered and unpaginated."""
    products = await store.find_all()
    return ProductListResponse(
        products=[ProductSchema.from_product(p) for p in products],
        total=len(products),
    )


# Registered before /{code} so "code" is not taken as a product code
@router.get("/code", response_model=CompatibilityReportResponse)
async def get_product_with_compatibles(
    code: str = Query(..., min_length=1),
    resolver: CompatibilityResolver = Depends(get_resolver),
) -> CompatibilityReportResponse:
    """Product by code with direct (compatibles) and inverse (compatibleWith) sets."""
    report = await resolver.lookup(code)
    return CompatibilityReportResponse.from_report(report)


@router.patch("/code/{code}/compatibles", response_model=ProductSchema)
async def replace_compatibles(
    code: str,
    payload: CompatiblesPayload = Body(...),
    store: CatalogStore = Depends(get_store),
) -> ProductSchema:
    """Replace the whole compatibles list of a product."""
    entries = payload if isinstance(payload, list) else payload.compatibles
    updated = await store.replace_compatibles(code, [ref.to_ref() for ref in entries])
    if updated is None:
        raise NotFoundError(code)
    return ProductSchema.from_product(updated)


@router.get("/{code}", response_model=ProductSchema)
async def get_product(code: str, store: CatalogStore = Depends(get_store)) -> ProductSchema:
    """Exact, case-sensitive lookup by code."""
    product = await store.find_by_code(code)
    if product is None:
        raise NotFoundError(code)
    return ProductSchema.from_product(product)


@router.get("/{code}/compatibles", response_model=List[ProductSchema])
async def get_compatibles(
    code: str,
    resolver: CompatibilityResolver = Depends(get_resolver),
) -> List[ProductSchema]:
    """Products declared in the product's compatibles (direct set only)."""
    compatibles = await resolver.direct_for_code(code)
    return [ProductSchema.from_product(p) for p in compatibles]
