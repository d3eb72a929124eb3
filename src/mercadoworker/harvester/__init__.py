"""
Harvester module for Mercado Libre catalog import.

Components:
- client: HTTP fetch wrapper for the public API
- paginator: seller search across pages
- enricher: product detail, description, category, seller, filters
- images: picture variation selection and import
- nodes: node envelopes for the host content graph
- orchestrator: Paginate -> Enrich -> Emit flow
- scheduler: APScheduler for periodic re-imports
"""

from .gather import BatchResult, gather_settled
from .host import HttpRemoteFileImporter, InMemoryNodeStore
from .orchestrator import CatalogOrchestrator, run_import
from .reporter import LoggingReporter, RecordingReporter, Reporter
from .scheduler import HarvesterScheduler

__all__ = [
    "BatchResult",
    "gather_settled",
    "HttpRemoteFileImporter",
    "InMemoryNodeStore",
    "CatalogOrchestrator",
    "run_import",
    "LoggingReporter",
    "RecordingReporter",
    "Reporter",
    "HarvesterScheduler",
]
