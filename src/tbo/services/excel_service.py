from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

from tbo.domain.errors import ValidationError
from tbo.repositories.memory_store import MemoryStore
from tbo.services.inventory_service import InventoryService
from tbo.services.product_service import ProductService

log = logging.getLogger(__name__)

INVENTORY_COLUMNS = [
    "item_code", "brand_named", "specifications", "category_name", "source",
    "order_number", "quantity", "current_stock", "cny_purchase_price",
    "usd_selling_price", "description", "warehouse_name",
]

# accepted spellings per logical column, compared lower-cased
HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "item_code": ("item_code", "sku_code", "sku", "itemcode", "item code"),
    "quantity": ("quantity",),
    "current_stock": ("current_stock", "currentstock", "current stock"),
    "brand_named": ("brand_named", "brand-named", "brandnamed", "brand name"),
    "specifications": ("specifications",),
    "category_name": ("category_name", "categoryname", "category name"),
    "source": ("source",),
    "order_number": ("order_number", "ordernumber", "order number"),
    "cny_purchase_price": ("cny_purchase_price", "cnypurchaseprice", "cny purchase price"),
    "usd_selling_price": ("usd_selling_price", "usdsellingprice", "usd selling price"),
    "description": ("description",),
    "warehouse_name": ("warehouse_name", "warehousename", "warehouse name"),
}

PRODUCT_TEXT_COLUMNS = (
    "brand_named", "specifications", "category_name", "source",
    "order_number", "description", "warehouse_name",
)


@dataclass(frozen=True)
class UpdatedItem:
    item_code: str
    old_quantity: int
    new_quantity: int

    @property
    def change(self) -> int:
        return self.new_quantity - self.old_quantity


@dataclass(frozen=True)
class NewItem:
    item_code: str
    product_id: str
    quantity: int


@dataclass(frozen=True)
class SkippedItem:
    item_code: str
    reason: str


@dataclass
class UploadAnalysis:
    new_items: list[NewItem] = field(default_factory=list)
    updated_items: list[UpdatedItem] = field(default_factory=list)
    skipped_items: list[SkippedItem] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.new_items) + len(self.updated_items) + len(self.skipped_items)


def _map_headers(ws) -> dict[str, int]:
    seen: dict[str, int] = {}
    for col in range(1, ws.max_column + 1):
        v = ws.cell(row=1, column=col).value
        if isinstance(v, str):
            seen[v.strip().lower()] = col

    headers: dict[str, int] = {}
    for key, aliases in HEADER_ALIASES.items():
        for alias in aliases:
            if alias in seen:
                headers[key] = seen[alias]
                break
    return headers


def _parse_number(raw: Any) -> Optional[float]:
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    text = str(raw).replace(",", "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _cell_text(ws, row: int, headers: dict[str, int], key: str) -> str:
    col = headers.get(key)
    if not col:
        return ""
    v = ws.cell(row=row, column=col).value
    return "" if v is None else str(v).strip()


def _bold_row(ws, r: int) -> None:
    for c in ws[r]:
        c.font = Font(bold=True)


def _set_widths(ws, widths: dict[str, int]) -> None:
    for col, w in widths.items():
        ws.column_dimensions[col].width = w


class ExcelService:
    def __init__(self, store: MemoryStore, products: ProductService, inventory: InventoryService):
        self.store = store
        self.products = products
        self.inventory = inventory

    def import_inventory_excel(self, path: str) -> UploadAnalysis:
        """
        Loads initial stock from the first sheet.

        Rows are keyed by item code. A ``current_stock`` column wins over
        ``quantity``. Products that already carry initial stock are left alone.
        Unknown item codes become new products.
        """
        wb = load_workbook(path, data_only=True)
        ws = wb.active
        headers = _map_headers(ws)
        analysis = UploadAnalysis()

        if "item_code" not in headers:
            analysis.skipped_items.append(SkippedItem(item_code="-", reason="Item code column not found"))
            log.warning("inventory_import_rejected path=%s reason=no_item_code_column", path)
            return analysis

        qty_key = "current_stock" if "current_stock" in headers else "quantity"
        if qty_key not in headers:
            raise ValidationError("Missing column header: quantity or current_stock")

        inventory = self.store.get_inventory()
        seen_codes: set[str] = set()

        for row in range(2, ws.max_row + 1):
            item_code = _cell_text(ws, row, headers, "item_code")
            if not item_code:
                if not any(ws.cell(row=row, column=c).value not in (None, "") for c in headers.values()):
                    continue
                analysis.skipped_items.append(SkippedItem(item_code=f"Row {row}", reason="Empty item code"))
                continue
            if item_code in seen_codes:
                analysis.skipped_items.append(SkippedItem(item_code=item_code, reason="Duplicate item code in uploaded file"))
                continue
            seen_codes.add(item_code)

            qty = _parse_number(ws.cell(row=row, column=headers[qty_key]).value)
            if qty is None or qty < 0 or qty != int(qty):
                analysis.skipped_items.append(SkippedItem(item_code=item_code, reason="Invalid quantity value"))
                continue
            qty = int(qty)

            existing = self.products.find_by_item_code(item_code)
            if existing:
                old = int(inventory.get(existing.id, 0))
                if old > 0:
                    analysis.skipped_items.append(SkippedItem(
                        item_code=item_code,
                        reason=f"Product already has initial inventory ({old})",
                    ))
                    continue
                new = qty if qty_key == "current_stock" else old + qty
                inventory[existing.id] = new
                analysis.updated_items.append(UpdatedItem(item_code=item_code, old_quantity=old, new_quantity=new))
                continue

            values: dict[str, Any] = {k: _cell_text(ws, row, headers, k) for k in PRODUCT_TEXT_COLUMNS}
            for price_key in ("cny_purchase_price", "usd_selling_price"):
                if price_key in headers:
                    price = _parse_number(ws.cell(row=row, column=headers[price_key]).value)
                    values[price_key] = price if price is not None and price >= 0 else 0.0
            if "quantity" in headers:
                base_qty = _parse_number(ws.cell(row=row, column=headers["quantity"]).value)
                values["quantity"] = int(base_qty) if base_qty is not None and base_qty >= 0 else 0

            product = self.products.add_product(item_code, **values)
            inventory[product.id] = qty
            analysis.new_items.append(NewItem(item_code=item_code, product_id=product.id, quantity=qty))

        self.store.set_inventory(inventory)
        log.info(
            "inventory_imported path=%s new=%s updated=%s skipped=%s",
            path, len(analysis.new_items), len(analysis.updated_items), len(analysis.skipped_items),
        )
        return analysis

    def export_inventory_template(self, path: str) -> None:
        wb = Workbook()
        ws = wb.active
        ws.title = "Inventory"
        ws.append(INVENTORY_COLUMNS)
        ws.append(["HW-001", "Brand", "Keyboard", "Hardware", "Supplier", "ORD-1", 100, 100, 500, 75, "", "Main"])
        _bold_row(ws, 1)
        ws.freeze_panes = "A2"
        _set_widths(ws, {"A": 14, "B": 16, "C": 28, "D": 16, "I": 18, "J": 18, "K": 28, "L": 16})
        wb.save(path)

    def export_current_inventory(self, path: str) -> int:
        wb = Workbook()
        ws = wb.active
        ws.title = "Inventory"
        ws.append(INVENTORY_COLUMNS)
        _bold_row(ws, 1)

        rows = self.inventory.stock_rows()
        for r in rows:
            p = r.product
            ws.append([
                p.item_code, p.brand_named, p.specifications, p.category_name, p.source,
                p.order_number, r.initial_stock, r.current_stock,
                float(p.cny_purchase_price), float(p.usd_selling_price),
                p.description, p.warehouse_name,
            ])
            out = ws.max_row
            ws[f"I{out}"].number_format = "#,##0.00"
            ws[f"J{out}"].number_format = "#,##0.00"

        ws.freeze_panes = "A2"
        _set_widths(ws, {"A": 14, "B": 16, "C": 28, "D": 16, "I": 18, "J": 18, "K": 28, "L": 16})
        wb.save(path)
        log.info("inventory_exported path=%s rows=%s", path, len(rows))
        return len(rows)

    def export_upload_analysis(self, analysis: UploadAnalysis, path: str) -> None:
        wb = Workbook()

        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = "Upload analysis"
        ws["A1"].font = Font(bold=True, size=14)
        summary = [
            ("New items", len(analysis.new_items)),
            ("Updated items", len(analysis.updated_items)),
            ("Skipped items", len(analysis.skipped_items)),
            ("Total rows", analysis.total_rows),
        ]
        for i, (label, val) in enumerate(summary, start=3):
            ws[f"A{i}"] = label
            ws[f"B{i}"] = val
        _set_widths(ws, {"A": 20, "B": 12})

        ws2 = wb.create_sheet("New Items")
        ws2.append(["Item Code", "Quantity"])
        _bold_row(ws2, 1)
        for it in analysis.new_items:
            ws2.append([it.item_code, it.quantity])

        ws3 = wb.create_sheet("Updated Items")
        ws3.append(["Item Code", "Old Quantity", "New Quantity", "Change"])
        _bold_row(ws3, 1)
        for it in analysis.updated_items:
            ws3.append([it.item_code, it.old_quantity, it.new_quantity, it.change])

        ws4 = wb.create_sheet("Skipped Items")
        ws4.append(["Item Code", "Reason"])
        _bold_row(ws4, 1)
        for it in analysis.skipped_items:
            ws4.append([it.item_code, it.reason])
        _set_widths(ws4, {"A": 16, "B": 44})

        wb.save(path)
