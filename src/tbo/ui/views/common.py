from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Optional


def make_tree(parent, columns: dict[str, tuple[str, int]], height: int = 14) -> ttk.Treeview:
    """columns: key -> (heading, width). Packs a Treeview with a vertical scrollbar into ``parent``."""
    wrap = ttk.Frame(parent)
    wrap.pack(fill="both", expand=True, padx=6, pady=6)

    tree = ttk.Treeview(wrap, columns=tuple(columns), show="headings", height=height)
    for key, (head, width) in columns.items():
        tree.heading(key, text=head)
        tree.column(key, width=width, anchor="w")

    vsb = ttk.Scrollbar(wrap, orient="vertical", command=tree.yview)
    tree.configure(yscrollcommand=vsb.set)
    tree.grid(row=0, column=0, sticky="nsew")
    vsb.grid(row=0, column=1, sticky="ns")
    wrap.columnconfigure(0, weight=1)
    wrap.rowconfigure(0, weight=1)
    return tree


def clear_tree(tree: ttk.Treeview) -> None:
    for item in tree.get_children():
        tree.delete(item)


def selected_iid(tree: ttk.Treeview) -> Optional[str]:
    sel = tree.selection()
    return sel[0] if sel else None


def entry(parent, label: str, row: int, width: int = 18) -> ttk.Entry:
    ttk.Label(parent, text=label).grid(row=row, column=0, sticky="w", padx=8, pady=4)
    e = ttk.Entry(parent, width=width)
    e.grid(row=row, column=1, sticky="ew", padx=8, pady=4)
    parent.columnconfigure(1, weight=1)
    return e


def combo(parent, label: str, row: int, values=(), width: int = 16, readonly: bool = True) -> ttk.Combobox:
    ttk.Label(parent, text=label).grid(row=row, column=0, sticky="w", padx=8, pady=4)
    c = ttk.Combobox(parent, values=list(values), width=width, state="readonly" if readonly else "normal")
    c.grid(row=row, column=1, sticky="ew", padx=8, pady=4)
    return c


def set_entry(e: ttk.Entry, value) -> None:
    e.delete(0, tk.END)
    e.insert(0, "" if value is None else str(value))


def fmt_money(value: float) -> str:
    return f"{value:,.2f}"
