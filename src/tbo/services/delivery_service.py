from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from tbo.domain.errors import NotFoundError, ValidationError
from tbo.domain.models import DELIVERY_TYPES, DESTINATIONS, Delivery, OrderNumberCategory
from tbo.repositories.memory_store import MemoryStore
from tbo.services.pagination import Page, paginate
from tbo.services.transaction_service import parse_iso_date

log = logging.getLogger(__name__)


class DeliveryService:
    def __init__(self, store: MemoryStore, page_size: int = 10):
        self.store = store
        self.page_size = page_size

    # ---------- order number categories ----------
    def list_categories(self) -> list[OrderNumberCategory]:
        return self.store.get_order_number_categories()

    def get_category(self, category_id: str) -> OrderNumberCategory:
        for c in self.store.get_order_number_categories():
            if c.id == category_id:
                return c
        raise NotFoundError("Order number category not found.")

    def add_category(self, name: str) -> OrderNumberCategory:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required.")
        category = OrderNumberCategory(id=self.store.new_id(), name=name)
        self.store.set_order_number_categories([*self.store.get_order_number_categories(), category])
        return category

    def rename_category(self, category_id: str, name: str) -> OrderNumberCategory:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required.")
        updated = replace(self.get_category(category_id), name=name)
        self.store.set_order_number_categories(
            [updated if c.id == category_id else c for c in self.store.get_order_number_categories()]
        )
        return updated

    def delete_category(self, category_id: str) -> None:
        # deliveries keep the id and show up as "N/A"
        self.get_category(category_id)
        self.store.set_order_number_categories(
            [c for c in self.store.get_order_number_categories() if c.id != category_id]
        )

    def category_name(self, category_id: str) -> str:
        for c in self.store.get_order_number_categories():
            if c.id == category_id:
                return c.name
        return "N/A"

    # ---------- deliveries ----------
    def get_delivery(self, delivery_id: str) -> Delivery:
        for d in self.store.get_deliveries():
            if d.id == delivery_id:
                return d
        raise NotFoundError("Delivery not found.")

    def add_delivery(
        self,
        order_number_category_id: str,
        delivery_date: str,
        carton_count: int,
        weight: float,
        receipt_number: str,
        delivery_type: str = "sea",
        destination: str = "dubai",
        receipt_photo: Optional[str] = None,
        cargo_photo: Optional[str] = None,
        description: str = "",
        is_arrived: bool = False,
    ) -> Delivery:
        self.get_category(order_number_category_id)
        try:
            carton_count = int(float(carton_count))
            weight = float(weight)
        except (TypeError, ValueError):
            raise ValidationError("Carton count and weight must be numbers.")
        if carton_count < 0 or weight < 0:
            raise ValidationError("Carton count and weight must be >= 0.")
        receipt_number = (receipt_number or "").strip()
        if not receipt_number:
            raise ValidationError("Receipt number is required.")
        if delivery_type not in DELIVERY_TYPES:
            raise ValidationError(f"Delivery type must be one of {', '.join(DELIVERY_TYPES)}.")
        if destination not in DESTINATIONS:
            raise ValidationError(f"Destination must be one of {', '.join(DESTINATIONS)}.")

        delivery = Delivery(
            id=self.store.new_id(),
            order_number_category_id=order_number_category_id,
            delivery_date=parse_iso_date(delivery_date, "Delivery date"),
            carton_count=carton_count,
            weight=weight,
            receipt_number=receipt_number,
            delivery_type=delivery_type,
            destination=destination,
            receipt_photo=receipt_photo or None,
            cargo_photo=cargo_photo or None,
            description=(description or "").strip(),
            is_arrived=bool(is_arrived),
        )
        self.store.set_deliveries([delivery, *self.store.get_deliveries()])
        log.info("delivery_added id=%s receipt=%s type=%s", delivery.id, delivery.receipt_number, delivery.delivery_type)
        return delivery

    def delete_delivery(self, delivery_id: str) -> None:
        self.get_delivery(delivery_id)
        self.store.set_deliveries([d for d in self.store.get_deliveries() if d.id != delivery_id])

    def set_arrived(self, delivery_id: str, arrived: bool) -> Delivery:
        updated = replace(self.get_delivery(delivery_id), is_arrived=bool(arrived))
        self.store.set_deliveries([updated if d.id == delivery_id else d for d in self.store.get_deliveries()])
        return updated

    def filter_deliveries(
        self,
        order_number_category_id: Optional[str] = None,
        delivery_type: Optional[str] = None,
        destination: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> list[Delivery]:
        rows = [
            d for d in self.store.get_deliveries()
            if (not order_number_category_id or d.order_number_category_id == order_number_category_id)
            and (not delivery_type or d.delivery_type == delivery_type)
            and (not destination or d.destination == destination)
            and (not date_from or d.delivery_date >= date_from)
            and (not date_to or d.delivery_date <= date_to)
        ]
        rows.sort(key=lambda d: d.delivery_date, reverse=True)
        return rows

    def list_page(self, page: int = 1, per_page: Optional[int] = None, **filters) -> Page[Delivery]:
        return paginate(self.filter_deliveries(**filters), page, per_page or self.page_size)
