"""Compatibility resolution over the directed product relation.

Direct compatibles are the products an anchor declares; inverse compatibles
are the products declaring the anchor. Dangling codes resolve to nothing.
"""

import asyncio
import logging
from typing import Iterable, List, Optional

from parts_catalog.models import CompatibilityReport, Product
from parts_catalog.services.catalog_store import CatalogStore
from parts_catalog.services.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def merge_unique(anchor_code: str, *groups: Iterable[Product]) -> List[Product]:
    """Concatenate product groups, keeping the first product per code.

    The anchor itself is always excluded.
    """
    seen = {anchor_code}
    merged = []
    for group in groups:
        for product in group:
            if product.code in seen:
                continue
            seen.add(product.code)
            merged.append(product)
    return merged


class CompatibilityResolver:
    """Resolves direct, inverse and merged compatibility sets."""

    def __init__(self, store: CatalogStore):
        self._store = store

    async def direct(self, anchor: Product) -> List[Product]:
        """Products referenced by the anchor's compatibles."""
        return await self._store.find_by_codes(anchor.compatible_codes)

    async def inverse(self, anchor: Product) -> List[Product]:
        """Products whose compatibles reference the anchor."""
        return await self._store.find_referencing(anchor.code)

    async def merged(self, anchor: Product) -> List[Product]:
        """Direct and inverse sets combined, deduplicated by code, anchor excluded.

        Direct entries win on collision since they are merged first.
        """
        direct, inverse = await asyncio.gather(self.direct(anchor), self.inverse(anchor))
        return merge_unique(anchor.code, direct, inverse)

    async def find_anchor(self, code: str, ignore_case: bool = False) -> Optional[Product]:
        """Exact lookup, optionally falling back to a case-insensitive exact match."""
        product = await self._store.find_by_code(code)
        if product is None and ignore_case:
            product = await self._store.find_by_code_case_insensitive(code)
        return product

    async def direct_for_code(self, code: str) -> List[Product]:
        """Direct compatibles of the product with this exact code.

        Raises:
            NotFoundError: If no product has the code.
        """
        anchor = await self.find_anchor(code)
        if anchor is None:
            raise NotFoundError(code)
        return await self.direct(anchor)

    async def lookup(self, code: str) -> CompatibilityReport:
        """Product by code with its direct and inverse sets kept separate.

        Raises:
            NotFoundError: If no product matches the code, even ignoring case.
        """
        anchor = await self.find_anchor(code.strip(), ignore_case=True)
        if anchor is None:
            raise NotFoundError(code)

        compatibles, compatible_with = await asyncio.gather(
            self.direct(anchor), self.inverse(anchor)
        )
        logger.debug(
            f"Resolved {anchor.code}: {len(compatibles)} direct, "
            f"{len(compatible_with)} inverse"
        )
        return CompatibilityReport(
            product=anchor,
            compatibles=compatibles,
            compatible_with=compatible_with,
        )
