"""Request and response schemas for the product API."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from parts_catalog.models import (
    CompatibilityReport,
    CompatibleRef,
    Product,
    SearchQuery,
    SearchResult,
)


class CamelModel(BaseModel):
    """Schema serialized with camelCase keys, accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CompatibleRefSchema(BaseModel):
    """Compatibility entry as returned over the API, stored values unchecked."""

    type: str
    code: str


class CompatibleRefInput(BaseModel):
    """Compatibility entry as sent by clients."""

    type: str = Field(min_length=1)
    code: str = Field(min_length=1)

    def to_ref(self) -> CompatibleRef:
        return CompatibleRef(type=self.type, code=self.code)


class ProductSchema(BaseModel):
    """Product as returned by the API."""

    code: str
    name: str
    brand: Optional[str] = None
    provider: Optional[str] = None
    group: Optional[str] = None
    line: Optional[str] = None
    image: Optional[str] = None
    type: Optional[str] = None
    datasheet: Optional[str] = None
    price: float = 0
    stock: int = 0
    compatibles: List[CompatibleRefSchema] = []

    @classmethod
    def from_product(cls, product: Product) -> "ProductSchema":
        return cls(
            code=product.code,
            name=product.name,
            brand=product.brand,
            provider=product.provider,
            group=product.group,
            line=product.line,
            image=product.image,
            type=product.type,
            datasheet=product.datasheet,
            price=product.price,
            stock=product.stock,
            compatibles=[
                CompatibleRefSchema(type=ref.type, code=ref.code)
                for ref in product.compatibles
            ],
        )


def _products(products: List[Product]) -> List[ProductSchema]:
    return [ProductSchema.from_product(p) for p in products]


class ProductCreate(BaseModel):
    """Creation payload. Required fields are checked by the catalog store."""

    code: Optional[str] = None
    name: Optional[str] = None
    brand: Optional[str] = None
    provider: Optional[str] = None
    group: Optional[str] = None
    line: Optional[str] = None
    image: Optional[str] = None
    type: Optional[str] = None
    datasheet: Optional[str] = None
    price: Optional[float] = None
    stock: Optional[int] = None
    compatibles: Optional[List[CompatibleRefInput]] = None

    def to_product(self) -> Product:
        return Product(
            code=self.code,
            name=self.name,
            brand=self.brand,
            provider=self.provider,
            group=self.group,
            line=self.line,
            image=self.image,
            type=self.type,
            datasheet=self.datasheet,
            price=self.price if self.price is not None else 0,
            stock=self.stock if self.stock is not None else 0,
            compatibles=[ref.to_ref() for ref in self.compatibles or []],
        )


class CompatiblesUpdate(BaseModel):
    """Replacement compatibles wrapped in an object."""

    compatibles: List[CompatibleRefInput]


class SearchRequest(CamelModel):
    """Faceted search payload."""

    query: Optional[str] = ""
    categories: List[str] = []
    page: int = 1
    page_size: Optional[int] = None

    @field_validator("categories", mode="before")
    @classmethod
    def _wrap_single_category(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    def to_query(self, default_page_size: int) -> SearchQuery:
        return SearchQuery(
            query=self.query or "",
            categories=tuple(self.categories),
            page=self.page,
            page_size=self.page_size if self.page_size is not None else default_page_size,
        )


class FacetSchema(BaseModel):
    name: str
    count: int


class FiltersSchema(BaseModel):
    types: List[FacetSchema]


class SearchResponse(CamelModel):
    """Search page with facets and optional exact code match."""

    products: List[ProductSchema]
    total: int
    total_pages: int
    current_page: int
    filters: FiltersSchema
    matched_product: Optional[ProductSchema] = None
    compatible_products: List[ProductSchema] = []

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResponse":
        return cls(
            products=_products(result.products),
            total=result.total,
            total_pages=result.total_pages,
            current_page=result.page,
            filters=FiltersSchema(
                types=[FacetSchema(name=f.name, count=f.count) for f in result.facets]
            ),
            matched_product=(
                ProductSchema.from_product(result.matched_product)
                if result.matched_product else None
            ),
            compatible_products=_products(result.compatible_products),
        )


class ProductListResponse(BaseModel):
    products: List[ProductSchema]
    total: int


class CompatibilityReportResponse(CamelModel):
    """Product with direct (compatibles) and inverse (compatibleWith) sets."""

    product: ProductSchema
    compatibles: List[ProductSchema]
    compatible_with: List[ProductSchema]

    @classmethod
    def from_report(cls, report: CompatibilityReport) -> "CompatibilityReportResponse":
        return cls(
            product=ProductSchema.from_product(report.product),
            compatibles=_products(report.compatibles),
            compatible_with=_products(report.compatible_with),
        )


CompatiblesPayload = Union[List[CompatibleRefInput], CompatiblesUpdate]
