"""Static catalog data and lookups."""

from __future__ import annotations

from dataclasses import dataclass

from mixpos.constant import CATEGORIES as _CATEGORIES_RAW
from mixpos.constant import PRODUCTS as _PRODUCTS_RAW
from mixpos.models import Category, Product

CATEGORIES: list[Category] = [
    Category(id=raw["id"], name=raw["name"], icon=raw.get("icon", "")) for raw in _CATEGORIES_RAW
]

PRODUCTS: list[Product] = [
    Product(
        id=str(raw["id"]),
        name=str(raw["name"]),
        price=float(raw["price"]),  # type: ignore[arg-type]
        category=str(raw["category"]),
        image=str(raw["image"]) if raw.get("image") else None,
    )
    for raw in _PRODUCTS_RAW
]


@dataclass(frozen=True)
class Catalog:
    """Ordered categories and the products listed under them."""

    categories: tuple[Category, ...]
    products: tuple[Product, ...]

    def products_in(self, category_id: str) -> list[Product]:
        return [product for product in self.products if product.category == category_id]

    def product(self, product_id: str) -> Product | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return None


DEFAULT_CATALOG = Catalog(categories=tuple(CATEGORIES), products=tuple(PRODUCTS))
