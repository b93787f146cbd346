"""Configuration module."""

from parts_catalog.config.configuration import (
    ApiConfig,
    AppConfig,
    CatalogConfig,
    ConfigurationError,
    CosmosDBConfig,
    LoggingConfig,
    SearchConfig,
    get_config,
    get_environment,
    load_config,
    reset_config,
)

__all__ = [
    "ApiConfig",
    "AppConfig",
    "CatalogConfig",
    "ConfigurationError",
    "CosmosDBConfig",
    "LoggingConfig",
    "SearchConfig",
    "get_config",
    "get_environment",
    "load_config",
    "reset_config",
]
