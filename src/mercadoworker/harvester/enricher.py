"""
Product, seller and filter enrichment.

Search results only carry item summaries. Each product is completed from
/items/{id}, /items/{id}/description and /categories/{id}, plus its
imported pictures. Store filters get full category trees.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence, Union

from ..errors import FetchError
from .client import MercadoLibreClient
from .gather import gather_settled
from .images import ImageResolver
from .models import (
    Category,
    CategoryRef,
    FilterValue,
    Product,
    Seller,
    StoreFilter,
    merge_product,
)
from .reporter import LoggingReporter, Reporter

logger = logging.getLogger(__name__)

CATEGORY_FILTER_ID = "category"


def _placeholder() -> List[CategoryRef]:
    return [CategoryRef(id="", name="")]


async def fetch_description(
    client: MercadoLibreClient, product_id: str, reporter: Reporter
) -> Optional[str]:
    try:
        payload = await client.description(product_id)
    except FetchError:
        reporter.info(f"Product with id {product_id} didn't provide a description from the API.")
        return None
    return payload.get("plain_text") if isinstance(payload, dict) else None


async def fetch_category(
    client: MercadoLibreClient, category_id: Optional[str], reporter: Reporter
) -> Optional[Category]:
    if not category_id:
        return None
    try:
        return Category.model_validate(await client.category(category_id))
    except FetchError as e:
        reporter.info(f"Category {category_id} could not be fetched: {e}")
        return None


async def fetch_product(
    client: MercadoLibreClient,
    product_id: str,
    resolver: Optional[ImageResolver] = None,
    reporter: Optional[Reporter] = None,
) -> Product:
    """Build the complete record for one product.

    Raises:
        FetchError: The item detail could not be fetched.
    """
    reporter = reporter or LoggingReporter()

    detail = Product.model_validate(await client.item(product_id))

    description, category = await asyncio.gather(
        fetch_description(client, product_id, reporter),
        fetch_category(client, detail.category_id, reporter),
    )

    images = []
    thumbnail = None
    if resolver is not None:
        images = await resolver.resolve_pictures(detail.id, detail.pictures)
        thumbnail = await resolver.resolve_thumbnail(detail.id, detail.pictures, images)

    return merge_product(detail, description, category, images, thumbnail)


async def enrich_products(
    client: MercadoLibreClient,
    summaries: Sequence[Product],
    resolver: Optional[ImageResolver] = None,
    reporter: Optional[Reporter] = None,
) -> List[Product]:
    """Enrich every summary; products whose detail fetch fails are dropped."""
    reporter = reporter or LoggingReporter()

    batch = await gather_settled(
        [fetch_product(client, s.id, resolver, reporter) for s in summaries],
        reporter=reporter,
        describe=lambda i, e: (
            f"Error getting product data for {summaries[i].id}, skipping it: {e}"
        ),
    )
    if batch.failures:
        logger.info(f"Dropped {len(batch.failures)} of {len(summaries)} products")
    return batch.successes


async def fetch_seller(
    client: MercadoLibreClient,
    seller_id: Union[int, str],
    reporter: Optional[Reporter] = None,
) -> Seller:
    """Seller profile, reduced to id, tags and permalink."""
    reporter = reporter or LoggingReporter()
    try:
        payload = await client.user(seller_id)
    except FetchError as e:
        reporter.warn(f"Seller {seller_id} could not be fetched: {e}")
        return Seller(id=seller_id)

    return Seller(
        id=seller_id,
        tags=payload.get("tags") or [],
        permalink=payload.get("permalink"),
    )


async def _backfill_value(
    client: MercadoLibreClient, value: FilterValue
) -> FilterValue:
    category = Category.model_validate(await client.category(value.id))
    return value.model_copy(
        update={
            "name": category.name or value.name,
            "path_from_root": category.path_from_root,
            "children_categories": category.children_categories,
        }
    )


async def backfill_category_filter(
    client: MercadoLibreClient,
    filters: Sequence[StoreFilter],
    reporter: Optional[Reporter] = None,
) -> List[StoreFilter]:
    """Replace the category filter's bare values with full category trees.

    Category values that cannot be fetched are dropped. Without a category
    filter, the first filter's values get placeholder trees instead.
    """
    reporter = reporter or LoggingReporter()
    updated: List[StoreFilter] = []
    has_category = False

    for store_filter in filters:
        if store_filter.id != CATEGORY_FILTER_ID:
            updated.append(store_filter)
            continue

        has_category = True
        values = store_filter.values
        batch = await gather_settled(
            [_backfill_value(client, value) for value in values],
            reporter=reporter,
            describe=lambda i, e, values=values: (
                f"Category {values[i].id} dropped from store filters: {e}"
            ),
        )
        updated.append(store_filter.model_copy(update={"values": batch.successes}))

    if not has_category and updated:
        first = updated[0]
        updated[0] = first.model_copy(
            update={
                "values": [
                    value.model_copy(
                        update={
                            "path_from_root": value.path_from_root or _placeholder(),
                            "children_categories": (
                                value.children_categories or _placeholder()
                            ),
                        }
                    )
                    for value in first.values or [FilterValue(id="")]
                ]
            }
        )

    return updated
