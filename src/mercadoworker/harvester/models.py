"""
Data model for the Mercado Libre catalog import.

Upstream payloads carry many more fields than are modelled here; models
that mirror API resources allow extra fields so nothing is lost on the way
into the content graph.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="allow")


# =========================================================================
# Pictures
# =========================================================================


class PictureRef(_ApiModel):
    """Picture entry as listed on an item."""

    id: str
    url: Optional[str] = None
    secure_url: Optional[str] = None
    size: Optional[str] = None
    max_size: Optional[str] = None


class PictureVariation(_ApiModel):
    size: Optional[str] = None
    url: Optional[str] = None
    secure_url: Optional[str] = None

    @property
    def best_url(self) -> Optional[str]:
        return self.secure_url or self.url


class Picture(_ApiModel):
    """Payload of /pictures/{id}."""

    id: str
    max_size: Optional[str] = None
    variations: List[PictureVariation] = Field(default_factory=list)


class ImageReference(BaseModel):
    """A picture imported into the host as a file node."""

    picture_id: str
    url: str
    node_id: str


# =========================================================================
# Categories
# =========================================================================


class CategoryRef(_ApiModel):
    id: str = ""
    name: str = ""


class Category(_ApiModel):
    """Payload of /categories/{id}."""

    id: str
    name: Optional[str] = None
    path_from_root: List[CategoryRef] = Field(default_factory=list)
    children_categories: List[CategoryRef] = Field(default_factory=list)


# =========================================================================
# Products
# =========================================================================


class Product(_ApiModel):
    """An item, as a search summary or a full /items/{id} payload.

    The item_* fields are filled in by enrichment.
    """

    id: str
    title: Optional[str] = None
    price: Optional[float] = None
    original_price: Optional[float] = None
    currency_id: Optional[str] = None
    permalink: Optional[str] = None
    category_id: Optional[str] = None
    video_id: Optional[str] = None
    pictures: List[PictureRef] = Field(default_factory=list)

    item_id: Optional[str] = None
    item_description: Optional[str] = None
    item_category: Optional[Category] = None
    item_images: List[ImageReference] = Field(default_factory=list)
    item_thumbnail: Optional[ImageReference] = None


def merge_product(
    detail: Product,
    description: Optional[str],
    category: Optional[Category],
    images: List[ImageReference],
    thumbnail: Optional[ImageReference],
) -> Product:
    """Combine an item with its separately fetched resources.

    Every enrichment field is assigned, so a missing resource shows up as
    None or an empty list rather than a stale value.
    """
    return detail.model_copy(
        update={
            "item_id": detail.id,
            "item_description": description,
            "item_category": category,
            "item_images": list(images),
            "item_thumbnail": thumbnail,
            "video_id": detail.video_id or "",
            "original_price": (
                detail.original_price
                if detail.original_price is not None
                else detail.price
            ),
        }
    )


# =========================================================================
# Seller and store filters
# =========================================================================


class Seller(BaseModel):
    """The subset of /users/{id} kept in the content graph."""

    id: Union[int, str]
    tags: List[str] = Field(default_factory=list)
    permalink: Optional[str] = None


class SellerRef(_ApiModel):
    id: Union[int, str]


class FilterValue(_ApiModel):
    id: str
    name: Optional[str] = None
    results: Optional[int] = None

    # Only set on category values once backfilled
    path_from_root: Optional[List[CategoryRef]] = None
    children_categories: Optional[List[CategoryRef]] = None


class StoreFilter(_ApiModel):
    id: str
    name: Optional[str] = None
    type: Optional[str] = None
    values: List[FilterValue] = Field(default_factory=list)


# =========================================================================
# Search
# =========================================================================


class Paging(_ApiModel):
    total: int = 0
    offset: int = 0
    limit: Optional[int] = None


class SearchPage(_ApiModel):
    """Payload of /sites/{site}/search."""

    paging: Paging = Field(default_factory=Paging)
    results: List[Product] = Field(default_factory=list)
    available_filters: List[StoreFilter] = Field(default_factory=list)
    seller: Optional[SellerRef] = None
