"""
Catalog Import Orchestrator.

Orchestrates the Paginate -> Enrich -> Emit flow for one seller:
search pages, seller profile, per-product enrichment with pictures,
category backfill on the store filters, then node emission into the host.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import SourceConfig
from .client import MercadoLibreClient
from .enricher import backfill_category_filter, enrich_products, fetch_seller
from .host import HttpRemoteFileImporter, InMemoryNodeStore, NodeStore, RemoteFileImporter
from .images import ImageResolver
from .nodes import (
    CreateContentDigest,
    CreateNodeId,
    build_filters_node,
    build_product_node,
    build_seller_node,
    create_content_digest,
    create_node_id,
)
from .paginator import fetch_catalog
from .reporter import LoggingReporter, Reporter

logger = logging.getLogger(__name__)


class CatalogOrchestrator:
    """
    Imports one seller's catalog into a host node store.

    Collaborators (node store, file importer, id and digest functions,
    reporter) are passed in; the HTTP client is created on first use unless
    one is given.
    """

    def __init__(
        self,
        config: SourceConfig,
        store: NodeStore,
        importer: RemoteFileImporter,
        reporter: Optional[Reporter] = None,
        client: Optional[MercadoLibreClient] = None,
        create_node_id: CreateNodeId = create_node_id,
        create_content_digest: CreateContentDigest = create_content_digest,
    ):
        self.config = config
        self.store = store
        self.importer = importer
        self.reporter = reporter or LoggingReporter()
        self.create_node_id = create_node_id
        self.create_content_digest = create_content_digest
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> MercadoLibreClient:
        """Lazy API client."""
        if self._client is None:
            self._client = MercadoLibreClient(
                api_host=self.config.api_host,
                timeout=self.config.request_timeout,
            )
        return self._client

    async def run(self) -> Dict[str, Any]:
        """Run the import.

        Returns:
            Dict with results: {total, fetched, enriched, dropped, emitted, errors}
        """
        cfg = self.config
        result: Dict[str, Any] = {
            "username": cfg.username,
            "site_id": cfg.site_id,
            "started_at": datetime.now(timezone.utc).isoformat(),
            "total": 0,
            "fetched": 0,
            "enriched": 0,
            "dropped": 0,
            "emitted": 0,
            "errors": [],
        }

        # Validate required config before touching the network
        missing = cfg.missing_fields()
        if missing:
            for name in missing:
                message = (
                    f"Please add a {name} to the Mercado Libre source configuration."
                )
                self.reporter.error(message)
                result["errors"].append(message)
            result["finished_at"] = datetime.now(timezone.utc).isoformat()
            return result

        client = self._get_client()
        search_endpoint = client.search_endpoint(cfg.site_id, cfg.username)

        try:
            await self._run(client, result)
        except Exception as e:
            message = (
                "There was a problem importing from Mercado Libre. "
                f"Check this endpoint: {search_endpoint}"
            )
            self.reporter.warn(message)
            logger.exception(f"Import failed for {cfg.username}@{cfg.site_id}: {e}")
            result["errors"].append(f"{message} ({e})")

        result["finished_at"] = datetime.now(timezone.utc).isoformat()
        logger.info(f"Import complete: {result}")
        return result

    async def _run(self, client: MercadoLibreClient, result: Dict[str, Any]) -> None:
        cfg = self.config
        reporter = self.reporter

        # 1. Search pages
        catalog = await fetch_catalog(
            client,
            cfg.site_id,
            cfg.username,
            page_size=cfg.page_size,
            policy=cfg.page_failure_policy,
            reporter=reporter,
        )
        result["total"] = catalog.total
        result["fetched"] = len(catalog.results)
        if catalog.failed_offsets:
            result["errors"].append(
                f"Search pages failed at offsets {catalog.failed_offsets}"
            )

        # 2. Seller
        seller = None
        if catalog.seller_id is not None:
            seller = await fetch_seller(client, catalog.seller_id, reporter)

        products_received = len(catalog.results)
        if products_received == 0:
            reporter.warn(
                "Mercado Libre API returned 0 products. Check the configuration "
                "options and make sure the user has published products."
            )
            return

        reporter.info("Importing from Mercado Libre...")
        if products_received > cfg.busy_catalog_threshold:
            reporter.info(
                f"Importing a lot of products ({products_received}). This may take a while."
            )
        if products_received > cfg.large_catalog_threshold:
            reporter.warn(f"Limiting to {cfg.large_catalog_image_cap} images per product.")

        # 3. Products
        resolver = ImageResolver(
            client,
            self.importer,
            total_products=products_received,
            threshold=cfg.large_catalog_threshold,
            cap=cfg.large_catalog_image_cap,
            reporter=reporter,
        )
        products = await enrich_products(client, catalog.results, resolver, reporter)
        result["enriched"] = len(products)
        result["dropped"] = products_received - len(products)

        reporter.info(f"{len(products)} products imported. Creating nodes...")

        # 4. Filters
        filters = await backfill_category_filter(client, catalog.filters, reporter)

        # 5. Emit
        if seller is not None:
            self._emit(build_seller_node(seller, self.create_node_id, self.create_content_digest))
            result["emitted"] += 1
        self._emit(build_filters_node(filters, self.create_node_id, self.create_content_digest))
        result["emitted"] += 1
        for product in products:
            self._emit(
                build_product_node(product, self.create_node_id, self.create_content_digest)
            )
            result["emitted"] += 1

    def _emit(self, node) -> None:
        self.store.create_node(node)

    async def close(self):
        """Close the API client if this orchestrator created it."""
        if self._client is not None and self._owns_client:
            await self._client.close()
            self._client = None


async def run_import(
    config: SourceConfig,
    store: Optional[NodeStore] = None,
    importer: Optional[RemoteFileImporter] = None,
    reporter: Optional[Reporter] = None,
    cache_dir: str | Path = ".cache/mercadoworker",
) -> Dict[str, Any]:
    """Run one import with in-process defaults for missing collaborators."""
    store = store if store is not None else InMemoryNodeStore()
    owned_importer = None
    if importer is None:
        owned_importer = HttpRemoteFileImporter(
            store, cache_dir, timeout=config.request_timeout
        )
        importer = owned_importer

    orchestrator = CatalogOrchestrator(config, store, importer, reporter=reporter)
    try:
        return await orchestrator.run()
    finally:
        await orchestrator.close()
        if owned_importer is not None:
            await owned_importer.close()
