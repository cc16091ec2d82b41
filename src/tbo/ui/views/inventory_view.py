from __future__ import annotations

from tkinter import ttk, filedialog, messagebox
from datetime import date
from pathlib import Path

from tbo.ui.views.common import clear_tree, make_tree, selected_iid, set_entry


class InventoryView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Inventory")
        self.last_analysis = None
        self._build()

    def _build(self):
        tab = self.frame

        box1 = ttk.LabelFrame(tab, text="Excel")
        box1.pack(fill="x", padx=10, pady=10)
        ttk.Label(
            box1,
            text="Headers: item_code | quantity or current_stock | optional product columns",
        ).pack(anchor="w", padx=10, pady=(8, 4))
        row = ttk.Frame(box1)
        row.pack(fill="x", padx=10, pady=(0, 10))
        ttk.Button(row, text="Import inventory", style="Big.TButton", command=self.import_excel).pack(side="left")
        ttk.Button(row, text="Download template", command=self.export_template).pack(side="left", padx=10)
        ttk.Button(row, text="Export current inventory", command=self.export_inventory).pack(side="left")
        self.analysis_btn = ttk.Button(row, text="Export last upload analysis", command=self.export_analysis, state="disabled")
        self.analysis_btn.pack(side="left", padx=10)

        box2 = ttk.LabelFrame(tab, text="Initial stock")
        box2.pack(fill="x", padx=10, pady=(0, 10))
        ttk.Label(box2, text="Quantity").pack(side="left", padx=(10, 4), pady=8)
        self.qty_e = ttk.Entry(box2, width=10)
        self.qty_e.pack(side="left", pady=8)
        self.qty_e.bind("<Return>", lambda _e: self.on_set_initial())
        ttk.Button(box2, text="Set for selected product", command=self.on_set_initial).pack(side="left", padx=10)

        box3 = ttk.LabelFrame(tab, text="Stock")
        box3.pack(fill="both", expand=True, padx=10, pady=(0, 10))
        self.tree = make_tree(box3, {
            "item_code": ("Item code", 120),
            "name": ("Product", 280),
            "initial": ("Initial stock", 110),
            "sold": ("Sold", 90),
            "current": ("Current stock", 110),
            "warehouse": ("Warehouse", 140),
        }, height=16)
        self.tree.tag_configure("empty", background="#ffdddd")
        self.tree.bind("<<TreeviewSelect>>", self._on_select)

    def _on_select(self, _evt=None):
        iid = selected_iid(self.tree)
        if iid is not None:
            set_entry(self.qty_e, self.app.inventory.initial_stock(iid))

    def on_set_initial(self):
        try:
            iid = selected_iid(self.tree)
            if iid is None:
                raise ValueError("Select a product.")
            self.app.inventory.set_initial_stock(iid, self.qty_e.get().strip())
            self.app.toast("Initial stock updated.", kind="success")
            self.app.refresh_all(show_toast=False)
        except Exception as e:
            self.app.handle_error("Inventory", e, "Failed to update stock.")

    def import_excel(self):
        path = filedialog.askopenfilename(title="Select Excel file", filetypes=[("Excel files", "*.xlsx")])
        if not path:
            return
        try:
            analysis = self.app.excel.import_inventory_excel(path)
        except Exception as e:
            self.app.handle_error("Import error", e, "Excel import failed.")
            return
        self.last_analysis = analysis
        self.analysis_btn.configure(state="normal")
        messagebox.showinfo(
            "Import finished",
            f"New items: {len(analysis.new_items)}\n"
            f"Updated items: {len(analysis.updated_items)}\n"
            f"Skipped items: {len(analysis.skipped_items)}",
            parent=self.frame,
        )
        self.app.refresh_all(show_toast=False)

    def _ask_save(self, title: str, name: str):
        return filedialog.asksaveasfilename(
            title=title,
            defaultextension=".xlsx",
            filetypes=[("Excel files", "*.xlsx")],
            initialdir=self.app.exports_dir,
            initialfile=name,
        )

    def export_template(self):
        path = self._ask_save("Save template as", "inventory_template.xlsx")
        if not path:
            return
        try:
            self.app.excel.export_inventory_template(path)
            self.app.toast(f"Template saved: {Path(path).name}", kind="success")
        except Exception as e:
            self.app.handle_error("Export error", e, "Template export failed.")

    def export_inventory(self):
        path = self._ask_save("Save inventory as", f"inventory_{date.today().isoformat()}.xlsx")
        if not path:
            return
        try:
            n = self.app.excel.export_current_inventory(path)
            self.app.toast(f"Inventory exported ({n} products).", kind="success")
        except Exception as e:
            self.app.handle_error("Export error", e, "Inventory export failed.")

    def export_analysis(self):
        if self.last_analysis is None:
            return
        path = self._ask_save("Save analysis as", f"upload_analysis_{date.today().isoformat()}.xlsx")
        if not path:
            return
        try:
            self.app.excel.export_upload_analysis(self.last_analysis, path)
            self.app.toast("Upload analysis exported.", kind="success")
        except Exception as e:
            self.app.handle_error("Export error", e, "Analysis export failed.")

    def refresh(self):
        clear_tree(self.tree)
        for r in self.app.inventory.stock_rows():
            p = r.product
            self.tree.insert("", "end", iid=p.id, values=(
                p.item_code, p.display_name, r.initial_stock, r.initial_stock - r.current_stock,
                r.current_stock, p.warehouse_name,
            ), tags=("empty",) if r.current_stock == 0 else ())
