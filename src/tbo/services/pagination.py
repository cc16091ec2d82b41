from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    total_pages: int
    total_items: int


def paginate(rows: Sequence[T], page: int = 1, per_page: int = 10) -> Page[T]:
    per_page = max(1, int(per_page))
    total_pages = math.ceil(len(rows) / per_page)
    page = min(max(1, int(page)), max(total_pages, 1))
    start = (page - 1) * per_page
    return Page(items=list(rows[start:start + per_page]), page=page, total_pages=total_pages, total_items=len(rows))
