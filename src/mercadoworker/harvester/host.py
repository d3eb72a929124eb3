"""
Host collaborators.

The import writes into a host content graph through two capabilities:
a node store and a remote-file importer. Both are consumed as protocols;
the in-process implementations below let the worker run standalone.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol
from urllib.parse import urlparse

import httpx

from .nodes import Node, NodeInternal, create_content_digest

logger = logging.getLogger(__name__)

FILE_TYPE = "File"


class NodeStore(Protocol):
    def create_node(self, node: Node) -> None: ...


class RemoteFileImporter(Protocol):
    async def __call__(self, *, url: str, parent: str, node_id: str) -> Node: ...


class InMemoryNodeStore:
    """Node store holding everything in a dict keyed by node id."""

    def __init__(self):
        self.nodes: Dict[str, Node] = {}

    def create_node(self, node: Node) -> None:
        if node.id in self.nodes:
            logger.debug(f"Replacing node {node.id} ({node.internal.type})")
        self.nodes[node.id] = node

    def by_type(self, node_type: str) -> List[Node]:
        return [n for n in self.nodes.values() if n.internal.type == node_type]

    def __len__(self) -> int:
        return len(self.nodes)


class HttpRemoteFileImporter:
    """Download a remote file into a local cache and register it as a File node."""

    def __init__(
        self,
        store: NodeStore,
        cache_dir: str | Path,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = 30.0,
    ):
        self.store = store
        self.cache_dir = Path(cache_dir)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout), follow_redirects=True
        )

    def cache_path(self, url: str) -> Path:
        url_hash = hashlib.md5(url.encode()).hexdigest()[:8]
        ext = Path(urlparse(url).path).suffix or ".jpg"
        return self.cache_dir / f"{url_hash}{ext}"

    async def __call__(self, *, url: str, parent: str, node_id: str) -> Node:
        """Download url and create a File node parented to parent.

        Raises:
            httpx.HTTPError: Download failed.
        """
        path = self.cache_path(url)
        if not path.exists():
            response = await self._client.get(url)
            response.raise_for_status()
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(response.content)
            logger.debug(f"Downloaded {url} -> {path}")

        data = {
            "url": url,
            "absolute_path": str(path.resolve()),
            "extension": path.suffix.lstrip("."),
            "size": path.stat().st_size,
        }
        node = Node(
            id=node_id,
            parent=parent,
            internal=NodeInternal(
                type=FILE_TYPE,
                content_digest=create_content_digest(data),
            ),
            data=data,
        )
        self.store.create_node(node)
        return node

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
