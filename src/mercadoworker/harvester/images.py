"""
Picture import.

For every picture listed on an item, query /pictures/{id}, pick one size
variation and hand its URL to the host's remote-file importer. Large
catalogs import fewer, smaller pictures per product.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Set, Tuple

from .client import MercadoLibreClient
from .gather import gather_settled
from .host import RemoteFileImporter
from .models import ImageReference, Picture, PictureRef, PictureVariation
from .reporter import LoggingReporter, Reporter

logger = logging.getLogger(__name__)

_SIZE_RE = re.compile(r"^\s*(\d+)\s*x\s*(\d+)\s*$", re.IGNORECASE)


def _area(size: Optional[str]) -> Optional[int]:
    match = _SIZE_RE.match(size or "")
    if not match:
        return None
    return int(match.group(1)) * int(match.group(2))


def select_variation(picture: Picture, smallest: bool = False) -> Optional[PictureVariation]:
    """Pick the variation to import.

    By default the one matching the picture's max_size, else the first listed.
    With smallest=True, the smallest by pixel area, else the last listed.
    """
    variations = picture.variations
    if not variations:
        return None

    if smallest:
        sized = [(a, v) for v in variations if (a := _area(v.size)) is not None]
        if sized:
            return min(sized, key=lambda pair: pair[0])[1]
        return variations[-1]

    if picture.max_size:
        for variation in variations:
            if variation.size == picture.max_size:
                return variation
    return variations[0]


def image_node_id(product_id: str, picture_id: str) -> str:
    return f"ml-image-{product_id}-{picture_id}"


class ImageResolver:
    """Resolves item pictures into imported image references.

    A picture that cannot be fetched or imported is reported and skipped;
    it never fails the product.
    """

    def __init__(
        self,
        client: MercadoLibreClient,
        importer: RemoteFileImporter,
        total_products: int,
        threshold: int = 300,
        cap: int = 3,
        reporter: Optional[Reporter] = None,
    ):
        self.client = client
        self.importer = importer
        self.total_products = total_products
        self.threshold = threshold
        self.cap = cap
        self.reporter = reporter or LoggingReporter()
        # (product_id, picture_id) pairs already tried, whatever the outcome
        self._attempted: Set[Tuple[str, str]] = set()

    @property
    def large_catalog(self) -> bool:
        return self.total_products > self.threshold

    def pictures_to_process(self, pictures: Sequence[PictureRef]) -> List[PictureRef]:
        if self.large_catalog:
            return list(pictures[: self.cap])
        return list(pictures)

    async def resolve_picture(
        self, product_id: str, picture_ref: PictureRef
    ) -> Optional[ImageReference]:
        self._attempted.add((product_id, picture_ref.id))
        try:
            picture = Picture.model_validate(await self.client.picture(picture_ref.id))
            variation = select_variation(picture, smallest=self.large_catalog)
            url = variation.best_url if variation else None
            if not url:
                self.reporter.warn(
                    f"Picture {picture_ref.id} of {product_id} has no usable variation"
                )
                return None

            file_node = await self.importer(
                url=url,
                parent=product_id,
                node_id=image_node_id(product_id, picture.id),
            )
        except Exception as e:
            self.reporter.warn(
                f"Error importing image {picture_ref.id} of {product_id} from Mercado Libre: {e}"
            )
            return None

        return ImageReference(picture_id=picture.id, url=url, node_id=file_node.id)

    async def resolve_pictures(
        self, product_id: str, pictures: Sequence[PictureRef]
    ) -> List[ImageReference]:
        batch = await gather_settled(
            [
                self.resolve_picture(product_id, ref)
                for ref in self.pictures_to_process(pictures)
            ],
            reporter=self.reporter,
        )
        return [ref for ref in batch.successes if ref is not None]

    async def resolve_thumbnail(
        self,
        product_id: str,
        pictures: Sequence[PictureRef],
        images: Sequence[ImageReference] = (),
    ) -> Optional[ImageReference]:
        """The first listed picture, reusing its import when already done.

        A picture that already failed for this product is not tried again.
        """
        if not pictures:
            return None
        first = pictures[0]
        for ref in images:
            if ref.picture_id == first.id:
                return ref
        if (product_id, first.id) in self._attempted:
            return None
        return await self.resolve_picture(product_id, first)
