"""Client-side category filtering and price sorting for catalog lists."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from src.config import settings
from src.models.catalog import SortMode
from src.models.product import Product

logger = logging.getLogger(__name__)

ALL = "all"
_RESERVED_TYPES = (list, tuple, set, frozenset)


def _fold(value: str | None) -> str:
    return value.strip().casefold() if isinstance(value, str) else ""


def _is_unfiltered(name: str | None) -> bool:
    return _fold(name) in ("", ALL)


class CategoryAliasTable:
    """Maps display category names onto canonical catalog names."""

    def __init__(self, aliases: Mapping[str, str] | None = None) -> None:
        self._aliases = {
            _fold(display): _fold(canonical)
            for display, canonical in (aliases or {}).items()
            if isinstance(display, str) and isinstance(canonical, str)
        }

    def resolve(self, name: str | None) -> str:
        folded = _fold(name)
        return self._aliases.get(folded, folded)


@dataclass(frozen=True)
class SubcategoryBucket:
    """Catch-all subcategory: any non-empty value outside `reserved`."""

    name: str
    reserved: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(cls, name: str, reserved: Iterable[str]) -> SubcategoryBucket:
        return cls(
            name=_fold(name),
            reserved=frozenset(_fold(value) for value in reserved),
        )

    def matches(self, sub_category: str | None) -> bool:
        folded = _fold(sub_category)
        return bool(folded) and folded not in self.reserved


def _buckets_from(
    table: Mapping[str, Iterable[str]] | None,
) -> dict[str, SubcategoryBucket]:
    buckets = {}
    for name, reserved in (table or {}).items():
        if not isinstance(name, str) or not isinstance(reserved, _RESERVED_TYPES):
            continue
        bucket = SubcategoryBucket.build(
            name, (value for value in reserved if isinstance(value, str))
        )
        buckets[bucket.name] = bucket
    return buckets


class CatalogView:
    """Reduces a product list to the ordered list a screen should render."""

    def __init__(
        self,
        aliases: CategoryAliasTable | None = None,
        buckets: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        self._aliases = aliases or CategoryAliasTable(settings.CATEGORY_ALIASES)
        self._buckets = _buckets_from(
            settings.SUBCATEGORY_BUCKETS if buckets is None else buckets
        )

    def matches_category(self, product: Product, category: str | None) -> bool:
        if _is_unfiltered(category):
            return True
        return _fold(product.category) == self._aliases.resolve(category)

    def matches_sub_category(self, product: Product, sub_category: str | None) -> bool:
        if _is_unfiltered(sub_category):
            return True
        bucket = self._buckets.get(_fold(sub_category))
        if bucket is not None:
            return bucket.matches(product.sub_category)
        return _fold(product.sub_category) == _fold(sub_category)

    def apply(
        self,
        products: Iterable[Product] | None,
        category: str | None = None,
        sub_category: str | None = None,
        sort_mode: SortMode | str | None = SortMode.NONE,
        *,
        delivery_active: bool = False,
    ) -> list[Product]:
        """Filter then stably sort `products`. Malformed input yields []."""

        if products is None or isinstance(products, (str, bytes, Mapping)):
            return []
        try:
            candidates = [item for item in products if isinstance(item, Product)]
        except TypeError:
            return []

        selected = [
            product
            for product in candidates
            if self.matches_category(product, category)
            and self.matches_sub_category(product, sub_category)
        ]

        mode = _sort_mode(sort_mode)
        if mode is SortMode.NONE:
            return selected

        # sorted() is stable, including with reverse=True.
        return sorted(
            selected,
            key=lambda product: comparison_price(product, delivery_active),
            reverse=mode is SortMode.PRICE_DESC,
        )


def comparison_price(product: Product, delivery_active: bool = False) -> float:
    if delivery_active and product.total_price > 0:
        return product.total_price
    return product.unit_price or product.base_price or 0.0


def _sort_mode(value: SortMode | str | None) -> SortMode:
    if isinstance(value, SortMode):
        return value
    try:
        return SortMode(value)
    except ValueError:
        logger.debug("Unknown sort mode %r; keeping input order", value)
        return SortMode.NONE


_default_view: CatalogView | None = None


def get_catalog_view() -> CatalogView:
    """FastAPI dependency returning the view configured from settings."""

    global _default_view
    if _default_view is None:
        _default_view = CatalogView()
    return _default_view


def view(
    products: Iterable[Product] | None,
    category: str | None = None,
    sub_category: str | None = None,
    sort_mode: SortMode | str | None = SortMode.NONE,
    *,
    delivery_active: bool = False,
) -> list[Product]:
    return get_catalog_view().apply(
        products,
        category,
        sub_category,
        sort_mode,
        delivery_active=delivery_active,
    )
