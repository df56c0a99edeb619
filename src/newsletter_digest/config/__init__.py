"""Configuration module for the newsletter digest."""

from newsletter_digest.config.factory import (
    build_query,
    create_curation,
    create_from_config,
    create_source,
)
from newsletter_digest.config.loader import get_default_config_path, load_config
from newsletter_digest.config.models import (
    CurationConfig,
    DigestConfig,
    LoggingConfig,
    SearchConfig,
    StorageConfig,
)

__all__ = [
    "CurationConfig",
    "DigestConfig",
    "LoggingConfig",
    "SearchConfig",
    "StorageConfig",
    "build_query",
    "create_curation",
    "create_from_config",
    "create_source",
    "get_default_config_path",
    "load_config",
]
