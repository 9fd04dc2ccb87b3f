"""
CatalogService -- add, edit and delete products and stock items.

Responsibility:
    The catalog collaborator.  Every change is written through the
    ``LedgerStore`` immediately.

Invariants enforced:
    - Product and stock item ids are unique within their catalog.
    - Prices coerce from raw input (non-numeric -> 0), never raise.
    - Deleting a product leaves historical quantities in place; they stop
      contributing to totals because totals iterate the catalog.

Failure modes:
    - ProductNotFoundError for edits/deletes of unknown ids.
    - DuplicateProductError when an explicit id collides.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any
from uuid import uuid4

from ledger_kernel.domain.catalog import Product, StockItem
from ledger_kernel.domain.records import CupSize
from ledger_kernel.domain.values import coerce_decimal
from ledger_kernel.exceptions import DuplicateProductError, ProductNotFoundError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.services.base import BaseService

logger = get_logger("services.catalog")

NEW_PRODUCT_NAME = "New Item"
NEW_PRODUCT_NAME_BN = "নতুন আইটেম"
NEW_PRODUCT_PRICE_SMALL = Decimal("100")
NEW_PRODUCT_PRICE_LARGE = Decimal("150")
NEW_PRODUCT_ICON = "🥤"
NEW_STOCK_NAME = "New Stock"
NEW_STOCK_NAME_BN = "নতুন স্টক"


def _new_id(prefix: str = "") -> str:
    return f"{prefix}{uuid4().hex[:12]}"


class CatalogService(BaseService):
    """Product and stock item management."""

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def get_product(self, product_id: str) -> Product:
        for product in self.store.products:
            if product.id == product_id:
                return product
        raise ProductNotFoundError(product_id)

    def add_product(
        self,
        name: str = NEW_PRODUCT_NAME,
        name_bn: str = NEW_PRODUCT_NAME_BN,
        price_small: Any = NEW_PRODUCT_PRICE_SMALL,
        price_large: Any = NEW_PRODUCT_PRICE_LARGE,
        icon: str | None = NEW_PRODUCT_ICON,
        color: str | None = None,
        product_id: str | None = None,
    ) -> Product:
        product_id = product_id or _new_id()
        if any(p.id == product_id for p in self.store.products):
            raise DuplicateProductError(product_id)
        product = Product(
            id=product_id,
            name=name,
            name_bn=name_bn,
            price_small=coerce_decimal(price_small),
            price_large=coerce_decimal(price_large),
            icon=icon,
            color=color,
        )
        self.store.set_products((*self.store.products, product))
        logger.info("product_added", extra={"product_id": product_id})
        return product

    def update_product(self, product_id: str, **changes: Any) -> Product:
        """
        Edit display fields or prices.

        Accepted keys: name, name_bn, icon, color, price_small, price_large.
        Prices are coerced from raw input.
        """
        allowed = {"name", "name_bn", "icon", "color", "price_small", "price_large"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Unknown product fields: {sorted(unknown)}")
        for price_field in ("price_small", "price_large"):
            if price_field in changes:
                changes[price_field] = coerce_decimal(changes[price_field])

        updated = self.get_product(product_id).with_changes(**changes)
        self.store.set_products(
            updated if p.id == product_id else p for p in self.store.products
        )
        logger.info(
            "product_updated",
            extra={"product_id": product_id, "fields": sorted(changes)},
        )
        return updated

    def set_price(self, product_id: str, size: CupSize | str, raw_value: Any) -> Product:
        field = "price_small" if CupSize(size) is CupSize.SMALL else "price_large"
        return self.update_product(product_id, **{field: raw_value})

    def delete_product(self, product_id: str) -> None:
        self.get_product(product_id)
        self.store.set_products(p for p in self.store.products if p.id != product_id)
        logger.info("product_deleted", extra={"product_id": product_id})

    # ------------------------------------------------------------------
    # Stock items
    # ------------------------------------------------------------------

    def get_stock_item(self, item_id: str) -> StockItem:
        for item in self.store.stock_items:
            if item.id == item_id:
                return item
        raise ProductNotFoundError(item_id)

    def add_stock_item(
        self,
        name: str = NEW_STOCK_NAME,
        name_bn: str = NEW_STOCK_NAME_BN,
        item_id: str | None = None,
    ) -> StockItem:
        item_id = item_id or _new_id("s")
        if any(s.id == item_id for s in self.store.stock_items):
            raise DuplicateProductError(item_id)
        item = StockItem(id=item_id, name=name, name_bn=name_bn)
        self.store.set_stock_items((*self.store.stock_items, item))
        logger.info("stock_item_added", extra={"item_id": item_id})
        return item

    def rename_stock_item(
        self, item_id: str, name: str | None = None, name_bn: str | None = None
    ) -> StockItem:
        item = self.get_stock_item(item_id)
        updated = item.with_changes(
            name=item.name if name is None else name,
            name_bn=item.name_bn if name_bn is None else name_bn,
        )
        self.store.set_stock_items(
            updated if s.id == item_id else s for s in self.store.stock_items
        )
        return updated

    def delete_stock_item(self, item_id: str) -> None:
        self.get_stock_item(item_id)
        self.store.set_stock_items(s for s in self.store.stock_items if s.id != item_id)
        logger.info("stock_item_deleted", extra={"item_id": item_id})
