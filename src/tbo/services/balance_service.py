from __future__ import annotations

from typing import Optional

from tbo.domain.balances import balance_rows, compute_balances, currency_totals, empty_balance, sort_for_display
from tbo.domain.models import BalanceRow
from tbo.repositories.memory_store import MemoryStore


class BalanceService:
    """Read-side view over the ledger. Nothing is cached; every call refolds the log."""

    def __init__(self, store: MemoryStore):
        self.store = store

    def balances(self) -> dict[int, dict[str, float]]:
        return compute_balances(self.store.get_persons(), self.store.get_transactions())

    def balance_of(self, person_id: int) -> dict[str, float]:
        return self.balances().get(int(person_id), empty_balance())

    def balance_rows(self, limit: Optional[int] = None) -> list[BalanceRow]:
        rows = balance_rows(self.store.get_persons(), self.store.get_transactions())
        return sort_for_display(rows, limit)

    def currency_totals(self) -> dict[str, float]:
        return currency_totals(self.store.get_transactions())
