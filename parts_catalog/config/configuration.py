"""Configuration module for the parts catalog service.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml (local Cosmos DB emulator)
- APP_ENV=test → config_test.yaml
- Default      → config.yaml

Cosmos DB credentials are loaded from the .env file.
Fails fast with clear error messages if required configuration is missing.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from parts_catalog/config/ up to project root
    return Path(__file__).parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable.

    Returns:
        Config filename:
        - APP_ENV=dev  → config_dev.yaml
        - APP_ENV=test → config_test.yaml
        - Default      → config.yaml
    """
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def _get_required_env(key: str) -> str:
    """Get required environment variable or raise ConfigurationError."""
    value = os.environ.get(key)
    if not value:
        raise ConfigurationError(
            f"Required environment variable '{key}' is not set. "
            f"Please add it to your .env file."
        )
    return value


def _get_positive_int(section: dict, key: str, default: int) -> int:
    """Read a positive integer setting or raise ConfigurationError."""
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(
            f"Setting '{key}' must be a positive integer, got {value!r}."
        )
    return value


@dataclass(frozen=True)
class CosmosDBConfig:
    """Azure Cosmos DB configuration for the product container."""
    endpoint: str
    key: str
    database_name: str
    container_name: str


@dataclass(frozen=True)
class SearchConfig:
    """Faceted search settings."""
    default_page_size: int
    max_page_size: int
    narrow_facets_to_selection: bool


@dataclass(frozen=True)
class CatalogConfig:
    """Catalog defaults applied when products are created."""
    default_provider: str


@dataclass(frozen=True)
class ApiConfig:
    """HTTP surface settings."""
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    cosmosdb: CosmosDBConfig
    search: SearchConfig
    catalog: CatalogConfig
    api: ApiConfig
    logging: LoggingConfig


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads from config.yaml for non-sensitive settings and .env for credentials.
    Fails fast if required configuration is missing.

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    # Load environment variables from .env file
    load_dotenv()

    # Load YAML configuration
    yaml_config = _load_yaml_config()

    # Build CosmosDB config
    cosmosdb_section = yaml_config.get("cosmosdb", {})

    cosmosdb_config = CosmosDBConfig(
        endpoint=_get_required_env("COSMOSDB_ENDPOINT"),
        key=_get_required_env("COSMOSDB_KEY"),
        database_name=cosmosdb_section.get("database_name", "parts_catalog"),
        container_name=cosmosdb_section.get("container_name", "products"),
    )

    # Build Search config
    search_section = yaml_config.get("search", {})

    search_config = SearchConfig(
        default_page_size=_get_positive_int(search_section, "default_page_size", 20),
        max_page_size=_get_positive_int(search_section, "max_page_size", 100),
        narrow_facets_to_selection=bool(
            search_section.get("narrow_facets_to_selection", False)
        ),
    )
    if search_config.default_page_size > search_config.max_page_size:
        raise ConfigurationError(
            "search.default_page_size cannot exceed search.max_page_size."
        )

    # Build Catalog config
    catalog_section = yaml_config.get("catalog", {})

    catalog_config = CatalogConfig(
        default_provider=catalog_section.get("default_provider", "Provider"),
    )

    # Build API config
    api_section = yaml_config.get("api", {})

    api_config = ApiConfig(
        host=api_section.get("host", "0.0.0.0"),
        port=int(os.environ.get("PORT") or api_section.get("port", 5000)),
        cors_origins=list(api_section.get("cors_origins", ["*"])),
    )

    # Build Logging config
    logging_section = yaml_config.get("logging", {})

    logging_config = LoggingConfig(
        level=logging_section.get("level", "INFO"),
    )

    return AppConfig(
        cosmosdb=cosmosdb_config,
        search=search_config,
        catalog=catalog_config,
        api=api_config,
        logging=logging_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.
    Config file is selected based on APP_ENV environment variable.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get current environment name.

    Returns:
        'dev', 'test', or 'default' based on APP_ENV.
    """
    app_env = os.environ.get("APP_ENV", "").lower()
    return app_env if app_env in ("dev", "test") else "default"


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _config
    _config = None
