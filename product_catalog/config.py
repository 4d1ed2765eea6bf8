"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class ProductCatalogConfig(BaseSettings):
    """Product catalog service configuration"""

    # Storage configuration
    storage_backend: str = "sqlite"  # sqlite or memory
    database_path: str = "product_catalog.db"

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8091

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 200

    # Security configuration
    auth_enabled: bool = False
    jwt_secret: str = "change-me-in-production-with-a-32-byte-secret"
    jwt_algorithm: str = "HS256"

    # Identity stamped on versions when the caller supplies none
    default_user_id: str = "SYSTEM"
    default_workstation_id: str = "WS001"
    default_program_id: str = "PGM001"

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout

    class Config:
        env_prefix = "PRODUCT_CATALOG_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = ProductCatalogConfig()


def get_config() -> ProductCatalogConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> ProductCatalogConfig:
    """Reload configuration from environment"""
    global config
    config = ProductCatalogConfig()
    return config
