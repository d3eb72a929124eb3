"""Node envelopes for the host content graph."""

from __future__ import annotations

import hashlib
import json
import uuid
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from .models import Product, Seller, StoreFilter

PRODUCT_TYPE = "MercadoLibreProduct"
SELLER_TYPE = "MercadoLibreSeller"
FILTERS_TYPE = "MercadoLibreStoreFilters"

NODE_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://api.mercadolibre.com")

CreateNodeId = Callable[[str], str]
CreateContentDigest = Callable[[Any], str]


class NodeInternal(BaseModel):
    type: str
    content: str = ""
    content_digest: str = ""


class Node(BaseModel):
    id: str
    parent: Optional[str] = None
    children: List[str] = Field(default_factory=list)
    internal: NodeInternal
    data: Dict[str, Any] = Field(default_factory=dict)


def create_node_id(seed: str) -> str:
    """Deterministic node id for a seed string."""
    return str(uuid.uuid5(NODE_NAMESPACE, seed))


def create_content_digest(content: Any) -> str:
    """md5 of the sorted-key JSON form of content."""
    if not isinstance(content, str):
        content = json.dumps(content, sort_keys=True, default=str)
    return hashlib.md5(content.encode()).hexdigest()


def _envelope(
    seed: str,
    node_type: str,
    data: Dict[str, Any],
    create_node_id: CreateNodeId,
    create_content_digest: CreateContentDigest,
) -> Node:
    return Node(
        id=create_node_id(seed),
        parent=None,
        children=[],
        internal=NodeInternal(
            type=node_type,
            content=json.dumps(data, default=str),
            content_digest=create_content_digest(data),
        ),
        data=data,
    )


def build_product_node(
    product: Product,
    create_node_id: CreateNodeId = create_node_id,
    create_content_digest: CreateContentDigest = create_content_digest,
) -> Node:
    return _envelope(
        f"ML-Product-{product.id}",
        PRODUCT_TYPE,
        product.model_dump(mode="json"),
        create_node_id,
        create_content_digest,
    )


def build_seller_node(
    seller: Seller,
    create_node_id: CreateNodeId = create_node_id,
    create_content_digest: CreateContentDigest = create_content_digest,
) -> Node:
    return _envelope(
        f"ML-Seller-{seller.id}",
        SELLER_TYPE,
        seller.model_dump(mode="json"),
        create_node_id,
        create_content_digest,
    )


def build_filters_node(
    filters: List[StoreFilter],
    create_node_id: CreateNodeId = create_node_id,
    create_content_digest: CreateContentDigest = create_content_digest,
) -> Node:
    return _envelope(
        "ML-StoreFilters",
        FILTERS_TYPE,
        {"filters": [f.model_dump(mode="json") for f in filters]},
        create_node_id,
        create_content_digest,
    )
