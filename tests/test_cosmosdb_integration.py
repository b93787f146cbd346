"""Integration tests for the Cosmos DB client and catalog store.

These tests require actual Cosmos DB credentials and connectivity.
They verify:
- CosmosDBClient connection and item operations
- Generated Cosmos SQL for search, facets and compatibility queries
- Search and resolution end to end on a throwaway container
"""

import uuid

import pytest

from parts_catalog.clients import CosmosDBClient
from parts_catalog.config import ConfigurationError, get_config
from parts_catalog.models import UNCATEGORIZED, CompatibleRef, Product, SearchQuery
from parts_catalog.services import (
    CatalogStore,
    CompatibilityResolver,
    DuplicateProductError,
    SearchService,
)


def cosmos_credentials_available() -> bool:
    """Check if Cosmos DB credentials are available."""
    try:
        config = get_config()
        return bool(config.cosmosdb.endpoint and config.cosmosdb.key)
    except ConfigurationError:
        return False


# Skip all tests if credentials not available
pytestmark = pytest.mark.skipif(
    not cosmos_credentials_available(),
    reason="Cosmos DB credentials not configured (COSMOSDB_ENDPOINT, COSMOSDB_KEY)",
)


@pytest.fixture
async def cosmos_client():
    """CosmosDBClient on a uniquely named container, deleted afterwards."""
    config = get_config()
    container_name = f"test-products-{uuid.uuid4().hex[:8]}"
    client = CosmosDBClient(
        endpoint=config.cosmosdb.endpoint,
        key=config.cosmosdb.key,
        database_name=config.cosmosdb.database_name,
        container_name=container_name,
    )
    await client.connect()
    yield client
    # Cleanup: delete test container
    try:
        if client._container:
            await client._database.delete_container(container_name)
    except Exception as e:
        print(f"Cleanup warning: {e}")
    await client.close()


@pytest.fixture
async def catalog_store(cosmos_client):
    store = CatalogStore(cosmos_client)
    for product in [
        Product(code="YA25", name="Plate", type="Mount", brand="Acme",
                compatibles=[CompatibleRef(type="Base", code="BB10")]),
        Product(code="BB10", name="Base", type="Base"),
        Product(code="SC05", name="Screw set", brand="Acme"),
    ]:
        await store.create(product)
    return store


class TestCosmosDBClient:
    """Test CosmosDBClient operations."""

    @pytest.mark.asyncio
    async def test_client_connection(self, cosmos_client):
        assert cosmos_client.is_connected

    @pytest.mark.asyncio
    async def test_query_without_connection_raises(self):
        config = get_config()
        client = CosmosDBClient.from_config(config.cosmosdb)

        with pytest.raises(RuntimeError, match="not connected"):
            await client.query_items("SELECT * FROM c")


class TestCatalogStoreIntegration:
    """Test the catalog store against a real container."""

    @pytest.mark.asyncio
    async def test_duplicate_code_conflicts(self, catalog_store):
        with pytest.raises(DuplicateProductError):
            await catalog_store.create(Product(code="YA25", name="Again"))

    @pytest.mark.asyncio
    async def test_case_insensitive_lookup(self, catalog_store):
        product = await catalog_store.find_by_code_case_insensitive("ya25")

        assert product.code == "YA25"

    @pytest.mark.asyncio
    async def test_distinct_types_include_sentinel(self, catalog_store):
        labels = await catalog_store.distinct_types()

        assert set(labels) == {"Mount", "Base", UNCATEGORIZED}

    @pytest.mark.asyncio
    async def test_search_with_code_match(self, catalog_store):
        service = SearchService(catalog_store)

        result = await service.search(SearchQuery(query="ya25"))

        assert result.total == 1
        assert result.matched_product.code == "YA25"
        assert [p.code for p in result.compatible_products] == ["BB10"]

    @pytest.mark.asyncio
    async def test_lookup_and_replace(self, catalog_store):
        resolver = CompatibilityResolver(catalog_store)

        report = await resolver.lookup("BB10")
        assert report.compatibles == []
        assert [p.code for p in report.compatible_with] == ["YA25"]

        await catalog_store.replace_compatibles("BB10", [CompatibleRef(type="Mount", code="YA25")])

        assert [p.code for p in await resolver.direct_for_code("BB10")] == ["YA25"]
