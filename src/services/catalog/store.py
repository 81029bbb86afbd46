"""In-memory holder for the current session's catalog snapshot."""

from __future__ import annotations

import logging
from threading import RLock

from src.models.catalog import CatalogSnapshot
from src.models.product import Product

logger = logging.getLogger(__name__)


class CatalogStore:
    """Keeps the latest snapshot; each fetch replaces it wholesale."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._snapshot = CatalogSnapshot()
        self._index: dict[str, Product] = {}

    def replace(self, snapshot: CatalogSnapshot) -> CatalogSnapshot:
        """Swap in a new snapshot and log the size for observability."""

        index = {product.id: product for product in snapshot.products}
        with self._lock:
            self._snapshot = snapshot
            self._index = index

        logger.info(
            "Catalog snapshot replaced with %d products (pincode=%s)",
            len(snapshot.products),
            snapshot.pincode,
        )
        return snapshot

    def current(self) -> CatalogSnapshot:
        with self._lock:
            return self._snapshot

    def find(self, product_id: str) -> Product | None:
        with self._lock:
            return self._index.get(product_id)


_store = CatalogStore()


def get_catalog_store() -> CatalogStore:
    """FastAPI dependency factory."""

    return _store
