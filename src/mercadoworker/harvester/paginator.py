"""
Seller search pagination.

Mercado Libre pages search results (50 per page by default) and exposes an
offset parameter for the following pages. The first page tells us the
total, the rest are fetched concurrently.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..config import PageFailurePolicy
from ..errors import PaginationError
from .client import MercadoLibreClient
from .gather import gather_settled
from .models import Product, SearchPage, StoreFilter
from .reporter import LoggingReporter, Reporter

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


@dataclass
class CatalogPage:
    """All search results for a seller, merged across pages."""

    total: int
    results: List[Product] = field(default_factory=list)
    filters: List[StoreFilter] = field(default_factory=list)
    seller_id: Optional[Union[int, str]] = None
    failed_offsets: List[int] = field(default_factory=list)


def page_offsets(total: int, page_size: int = PAGE_SIZE) -> List[int]:
    """Offsets of the pages after the first one."""
    pages = math.ceil(total / page_size) if total > 0 else 1
    return [page_size * k for k in range(1, pages)]


async def fetch_catalog(
    client: MercadoLibreClient,
    site_id: str,
    nickname: str,
    page_size: int = PAGE_SIZE,
    policy: PageFailurePolicy = PageFailurePolicy.SKIP,
    reporter: Optional[Reporter] = None,
) -> CatalogPage:
    """Fetch every search page for a seller.

    Raises:
        FetchError: The first page failed.
        PaginationError: A later page failed and policy is ABORT.
    """
    reporter = reporter or LoggingReporter()

    first = SearchPage.model_validate(await client.search(site_id, nickname, 0))
    total = first.paging.total
    offsets = page_offsets(total, page_size)
    logger.info(f"Seller {nickname}@{site_id}: {total} products, {len(offsets) + 1} pages")

    async def _page(offset: int) -> SearchPage:
        return SearchPage.model_validate(await client.search(site_id, nickname, offset))

    batch = await gather_settled(
        [_page(offset) for offset in offsets],
        reporter=reporter,
        describe=lambda i, e: f"Search page at offset {offsets[i]} failed: {e}",
    )
    failed = [offsets[i] for i, _ in batch.failures]
    if failed and policy == PageFailurePolicy.ABORT:
        raise PaginationError(failed)

    results = list(first.results)
    for page in batch.successes:
        results.extend(page.results)

    if failed:
        reporter.warn(
            f"Skipped {len(failed)} search page(s); "
            f"{len(results)} of {total} products retrieved"
        )

    return CatalogPage(
        total=total,
        results=results,
        filters=list(first.available_filters),
        seller_id=first.seller.id if first.seller else None,
        failed_offsets=failed,
    )
