"""Client modules for external services."""

from parts_catalog.clients.cosmosdb_client import CosmosDBClient

__all__ = [
    "CosmosDBClient",
]
