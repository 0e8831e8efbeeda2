"""
HerbScape Backend — Per-Client Page Registry
==============================================

What:  Keeps one CatalogPage per browser client, keyed by the client cookie.
How:   Insertion-ordered dict used as an LRU: every access moves the page to
       the end; past `max_clients` the least recently seen page is disposed.
Who:   Page and API routes (via get_page in routes/deps.py).

Thread Safety:
    Single event loop (uvicorn); no awaits happen while the dict is mutated.
"""

import logging
import uuid
from collections import OrderedDict
from typing import Callable, Optional

from herbscape.catalog.page import CatalogPage
from herbscape.config import settings

logger = logging.getLogger(__name__)

CLIENT_COOKIE = "herbscape_client"


class PageRegistry:
    """Client id → CatalogPage, bounded by `max_clients`."""

    def __init__(
        self,
        max_clients: Optional[int] = None,
        factory: Callable[[str], CatalogPage] = CatalogPage,
    ):
        self.max_clients = max_clients or settings.max_clients
        self._factory = factory
        self._pages: "OrderedDict[str, CatalogPage]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, client_id: str) -> bool:
        return client_id in self._pages

    @staticmethod
    def new_client_id() -> str:
        return uuid.uuid4().hex

    def get_or_create(self, client_id: str) -> CatalogPage:
        page = self._pages.get(client_id)
        if page is None:
            page = self._factory(client_id)
            self._pages[client_id] = page
            logger.debug("Created page for client %s", client_id)
            self._evict()
        else:
            self._pages.move_to_end(client_id)
        page.touch()
        return page

    def drop(self, client_id: str) -> None:
        page = self._pages.pop(client_id, None)
        if page is not None:
            page.dispose()

    def _evict(self) -> None:
        while len(self._pages) > self.max_clients:
            client_id, page = self._pages.popitem(last=False)
            page.dispose()
            logger.info("Evicted page of client %s", client_id)

    def clear(self) -> None:
        for page in self._pages.values():
            page.dispose()
        self._pages.clear()


# ── Singleton Instance ────────────────────────────────────────────────────
page_registry = PageRegistry()
