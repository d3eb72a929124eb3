"""
MercadoWorker - Mercado Libre catalog import for content graphs.

Pulls a seller's products from the Mercado Libre public API, enriches
them with descriptions, categories and pictures, and emits nodes into a
host node store.

Usage:
    from mercadoworker import SourceConfig, run_import

    result = await run_import(SourceConfig(username="SELLER", site_id="MLA"))
"""

__version__ = "0.1.0"

from .config import PageFailurePolicy, SourceConfig, WorkerConfig, get_config
from .errors import ConfigurationError, FetchError, PaginationError
from .harvester import (
    CatalogOrchestrator,
    HarvesterScheduler,
    InMemoryNodeStore,
    run_import,
)

__all__ = [
    "__version__",
    # Config
    "PageFailurePolicy",
    "SourceConfig",
    "WorkerConfig",
    "get_config",
    # Errors
    "ConfigurationError",
    "FetchError",
    "PaginationError",
    # Import
    "CatalogOrchestrator",
    "HarvesterScheduler",
    "InMemoryNodeStore",
    "run_import",
]
