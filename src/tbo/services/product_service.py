from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional

from tbo.domain.errors import NotFoundError, ValidationError
from tbo.domain.models import Product
from tbo.repositories.memory_store import MemoryStore

log = logging.getLogger(__name__)

TEXT_FIELDS = (
    "item_code",
    "brand_named",
    "specifications",
    "category_name",
    "source",
    "order_number",
    "description",
    "warehouse_name",
)
EDITABLE_FIELDS = {f.name for f in fields(Product)} - {"id"}


@dataclass(frozen=True)
class ProductFilter:
    item_code: str = ""
    brand_named: str = ""
    specifications: str = ""
    category_name: str = ""
    source: str = ""
    order_number: str = ""
    description: str = ""
    warehouse_name: str = ""
    min_quantity: Optional[float] = None
    max_quantity: Optional[float] = None
    min_cny_price: Optional[float] = None
    max_cny_price: Optional[float] = None
    min_usd_price: Optional[float] = None
    max_usd_price: Optional[float] = None
    min_stock: Optional[float] = None
    max_stock: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return any(getattr(self, f.name) not in ("", None) for f in fields(self))


def _in_range(value: float, low: Optional[float], high: Optional[float]) -> bool:
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def _clean_fields(values: Mapping[str, object]) -> dict[str, object]:
    unknown = set(values) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Unknown product fields: {', '.join(sorted(unknown))}")

    cleaned: dict[str, object] = {}
    for key, value in values.items():
        if key in TEXT_FIELDS:
            cleaned[key] = str(value or "").strip()
        elif key == "quantity":
            try:
                cleaned[key] = int(float(value or 0))
            except (TypeError, ValueError):
                raise ValidationError("Quantity must be an integer.")
        else:
            try:
                cleaned[key] = float(value or 0)
            except (TypeError, ValueError):
                raise ValidationError(f"{key} must be a number.")
            if cleaned[key] < 0:
                raise ValidationError("Prices must be >= 0.")
    return cleaned


class ProductService:
    def __init__(self, store: MemoryStore):
        self.store = store

    def list_products(self) -> list[Product]:
        return self.store.get_products()

    def get_product(self, product_id: str) -> Product:
        for p in self.store.get_products():
            if p.id == product_id:
                return p
        raise NotFoundError("Product not found.")

    def find_by_item_code(self, item_code: str) -> Optional[Product]:
        code = (item_code or "").strip()
        for p in self.store.get_products():
            if p.item_code == code:
                return p
        return None

    def add_product(self, item_code: str, **values) -> Product:
        cleaned = _clean_fields({"item_code": item_code, **values})
        if not cleaned["item_code"]:
            raise ValidationError("Item code is required.")
        product = Product(id=self.store.new_id(), **cleaned)
        self.store.set_products([product, *self.store.get_products()])
        log.info("product_added id=%s item_code=%s", product.id, product.item_code)
        return product

    def update_product(self, product_id: str, **values) -> Product:
        current = self.get_product(product_id)
        cleaned = _clean_fields(values)
        if "item_code" in cleaned and not cleaned["item_code"]:
            raise ValidationError("Item code is required.")
        updated = replace(current, **cleaned)
        self.store.set_products([updated if p.id == current.id else p for p in self.store.get_products()])
        return updated

    def delete_product(self, product_id: str) -> None:
        """Remove the product only; inventory entries and invoice lines keep their ids."""
        self.get_product(product_id)
        self.store.set_products([p for p in self.store.get_products() if p.id != product_id])
        log.info("product_deleted id=%s", product_id)

    def filter_products(self, flt: ProductFilter, current_stock: Mapping[str, int]) -> list[Product]:
        out = []
        for p in self.store.get_products():
            if not all(
                getattr(flt, name).strip().lower() in getattr(p, name).lower()
                for name in TEXT_FIELDS
                if getattr(flt, name).strip()
            ):
                continue
            if not _in_range(p.quantity or 0, flt.min_quantity, flt.max_quantity):
                continue
            if not _in_range(p.cny_purchase_price or 0, flt.min_cny_price, flt.max_cny_price):
                continue
            if not _in_range(p.usd_selling_price or 0, flt.min_usd_price, flt.max_usd_price):
                continue
            if not _in_range(current_stock.get(p.id, 0), flt.min_stock, flt.max_stock):
                continue
            out.append(p)
        return out
