"""Catalog service exceptions."""


class CatalogError(Exception):
    """Base exception for catalog operations."""

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Raised when a request or product fails validation."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message=message, code="VALIDATION_ERROR")
        self.field = field


class NotFoundError(CatalogError):
    """Raised when no product matches the requested code."""

    def __init__(self, product_code: str):
        super().__init__(
            message=f"Product with code '{product_code}' not found",
            code="NOT_FOUND",
        )
        self.product_code = product_code


class DuplicateProductError(CatalogError):
    """Raised when creating a product whose code already exists."""

    def __init__(self, product_code: str):
        super().__init__(
            message=f"Product with code '{product_code}' already exists",
            code="DUPLICATE_PRODUCT",
        )
        self.product_code = product_code


class StoreError(CatalogError):
    """Raised when the document store is unreachable or a query fails."""

    def __init__(self, message: str, detail: str = None):
        super().__init__(message=message, code="STORE_ERROR")
        self.detail = detail
