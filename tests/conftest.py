"""Shared fixtures: a fake Mercado Libre API served through httpx.MockTransport."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
import pytest_asyncio

from mercadoworker.harvester.client import MercadoLibreClient
from mercadoworker.harvester.nodes import Node, NodeInternal

API_HOST = "https://api.test"
SITE = "MLA"
NICKNAME = "SELLER"
SELLER_ID = 4242


class FakeMarketplace:
    """Routes GET requests by path (search pages keyed by offset)."""

    def __init__(self):
        self.routes: Dict[str, Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    @staticmethod
    def _key(path: str, offset: Optional[int] = None) -> str:
        return f"{path}@{offset}" if offset is not None else path

    def add(self, path: str, payload: Any, status: int = 200, offset: Optional[int] = None):
        self.routes[self._key(path, offset)] = (status, payload)

    def fail(self, path: str, status: int = 500, offset: Optional[int] = None):
        self.routes[self._key(path, offset)] = (status, {"message": "boom"})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        offset = request.url.params.get("offset")
        key = self._key(request.url.path, int(offset) if offset is not None else None)
        if key not in self.routes:
            return httpx.Response(404, json={"message": "not_found"})
        status, payload = self.routes[key]
        return httpx.Response(status, json=payload)

    def count(self, path_prefix: str) -> int:
        return sum(1 for r in self.requests if r.url.path.startswith(path_prefix))

    # -- catalog seeding --

    def seed_catalog(
        self,
        total: int,
        page_size: int = 50,
        pictures_per_product: int = 1,
        filters: Optional[list] = None,
    ) -> List[str]:
        """Register search pages, items, descriptions, categories and pictures."""
        ids = [f"{SITE}{i:04d}" for i in range(total)]
        pages = max(1, math.ceil(total / page_size))
        for page in range(pages):
            chunk = ids[page * page_size : (page + 1) * page_size]
            self.add(
                f"/sites/{SITE}/search",
                {
                    "paging": {"total": total, "offset": page * page_size, "limit": page_size},
                    "results": [{"id": pid, "title": f"Product {pid}"} for pid in chunk],
                    "available_filters": filters if filters is not None else [],
                    "seller": {"id": SELLER_ID},
                },
                offset=page * page_size,
            )

        self.add(
            f"/users/{SELLER_ID}",
            {
                "id": SELLER_ID,
                "nickname": NICKNAME,
                "tags": ["normal", "eshop"],
                "permalink": "http://perfil.test/SELLER",
                "address": {"city": "Buenos Aires"},
            },
        )
        self.add("/categories/MLA1000", category_payload("MLA1000", "Electronics"))

        for pid in ids:
            pictures = [{"id": f"{pid}-P{n}"} for n in range(pictures_per_product)]
            self.add(
                f"/items/{pid}",
                {
                    "id": pid,
                    "title": f"Product {pid}",
                    "price": 100.0,
                    "currency_id": "ARS",
                    "category_id": "MLA1000",
                    "pictures": pictures,
                },
            )
            self.add(f"/items/{pid}/description", {"plain_text": f"About {pid}"})
            for pic in pictures:
                self.add(f"/pictures/{pic['id']}", picture_payload(pic["id"]))
        return ids


def category_payload(category_id: str, name: str) -> dict:
    return {
        "id": category_id,
        "name": name,
        "path_from_root": [{"id": category_id, "name": name}],
        "children_categories": [{"id": f"{category_id}1", "name": f"{name} child"}],
    }


def picture_payload(picture_id: str, max_size: str = "500x500") -> dict:
    return {
        "id": picture_id,
        "max_size": max_size,
        "variations": [
            {"size": "500x500", "secure_url": f"https://img.test/{picture_id}-500.jpg"},
            {"size": "100x100", "secure_url": f"https://img.test/{picture_id}-100.jpg"},
        ],
    }


class FakeImporter:
    """Remote file importer that records calls and fails for chosen URLs."""

    def __init__(self, failing_urls: Optional[set] = None):
        self.calls: List[dict] = []
        self.failing_urls = failing_urls or set()

    async def __call__(self, *, url: str, parent: str, node_id: str) -> Node:
        self.calls.append({"url": url, "parent": parent, "node_id": node_id})
        if url in self.failing_urls:
            raise RuntimeError(f"download failed: {url}")
        return Node(id=node_id, parent=parent, internal=NodeInternal(type="File"))


@pytest.fixture
def fake_api() -> FakeMarketplace:
    return FakeMarketplace()


@pytest_asyncio.fixture
async def api_client(fake_api):
    http = httpx.AsyncClient(base_url=API_HOST, transport=httpx.MockTransport(fake_api.handler))
    client = MercadoLibreClient(api_host=API_HOST, client=http)
    yield client
    await http.aclose()


@pytest.fixture
def importer() -> FakeImporter:
    return FakeImporter()
