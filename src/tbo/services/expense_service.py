from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from tbo.domain.balances import compute_balances
from tbo.domain.errors import NotFoundError, ValidationError
from tbo.domain.models import PAYMENT_OUT, CategorySummary, Expense, ExpenseCategory, Person, Transaction
from tbo.repositories.memory_store import MemoryStore
from tbo.services.transaction_service import TransactionService

log = logging.getLogger("tbo.ledger")

EXPENSE_CURRENCY = "CNY"


class ExpenseService:
    """Per-category CNY expenses paid out by a single holder account.

    An expense is a PaymentOut in CNY on the holder whose ``category_id`` points
    at one of the expense categories.
    """

    def __init__(self, store: MemoryStore, transactions: TransactionService, holder_name: str = "Jack"):
        self.store = store
        self.transactions = transactions
        self.holder_name = holder_name

    def holder(self) -> Person:
        for p in self.store.get_persons():
            if p.name == self.holder_name:
                return p
        raise NotFoundError(f'"{self.holder_name}" user not found. Cannot manage payments.')

    def holder_cny_balance(self) -> float:
        try:
            holder = self.holder()
        except NotFoundError:
            return 0.0
        balances = compute_balances(self.store.get_persons(), self.store.get_transactions())
        return balances[holder.id][EXPENSE_CURRENCY]

    def _is_expense(self, tx: Transaction, holder_id: int) -> bool:
        return (
            tx.category_id is not None
            and tx.entity_id == holder_id
            and tx.type == PAYMENT_OUT
            and tx.currency == EXPENSE_CURRENCY
        )

    # ---------- categories ----------
    def list_categories(self) -> list[ExpenseCategory]:
        return self.store.get_expense_categories()

    def get_category(self, category_id: str) -> ExpenseCategory:
        for c in self.store.get_expense_categories():
            if c.id == category_id:
                return c
        raise NotFoundError("Expense category not found.")

    def add_category(self, name: str) -> ExpenseCategory:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required.")
        category = ExpenseCategory(id=self.store.new_id(), name=name)
        self.store.set_expense_categories([category, *self.store.get_expense_categories()])
        return category

    def rename_category(self, category_id: str, name: str) -> ExpenseCategory:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required.")
        current = self.get_category(category_id)
        updated = replace(current, name=name)
        self.store.set_expense_categories(
            [updated if c.id == category_id else c for c in self.store.get_expense_categories()]
        )
        return updated

    def delete_category(self, category_id: str) -> int:
        """Delete the category and its expenses. Returns how many expenses were removed."""
        self.get_category(category_id)
        doomed = {tx.id for tx in self.store.get_transactions() if tx.category_id == category_id}
        if doomed:
            self.store.set_transactions([tx for tx in self.store.get_transactions() if tx.id not in doomed])
        self.store.set_expense_categories([c for c in self.store.get_expense_categories() if c.id != category_id])
        log.info("expense_category_deleted id=%s expenses_removed=%s", category_id, len(doomed))
        return len(doomed)

    # ---------- expenses ----------
    def add_expense(self, category_id: str, amount: float, description: str = "", date: Optional[str] = None) -> Expense:
        holder = self.holder()
        self.get_category(category_id)
        tx = self.transactions.add_transaction(
            PAYMENT_OUT,
            amount,
            EXPENSE_CURRENCY,
            date=date,
            description=description,
            entity_id=holder.id,
            category_id=category_id,
        )
        return Expense(id=tx.id, date=tx.date, description=tx.description, amount=tx.amount)

    def update_expense(
        self,
        expense_id: str,
        *,
        amount: Optional[float] = None,
        description: Optional[str] = None,
        date: Optional[str] = None,
    ) -> Expense:
        tx = self.transactions.get_transaction(expense_id)
        if tx.category_id is None:
            raise NotFoundError("Expense not found.")
        changes: dict = {}
        if amount is not None:
            try:
                changes["amount"] = float(amount)
            except (TypeError, ValueError):
                raise ValidationError("Amount must be a number.")
        if description is not None:
            changes["description"] = description.strip()
        if date is not None:
            changes["date"] = date.strip()
        updated = self.transactions.update_transaction(replace(tx, **changes))
        return Expense(id=updated.id, date=updated.date, description=updated.description, amount=updated.amount)

    def delete_expense(self, expense_id: str) -> None:
        tx = self.transactions.get_transaction(expense_id)
        if tx.category_id is None:
            raise NotFoundError("Expense not found.")
        self.transactions.delete_transaction(expense_id)

    def categories_with_expenses(self) -> list[CategorySummary]:
        holder = self.holder()
        by_category: dict[str, list[Expense]] = {}
        for tx in self.store.get_transactions():
            if not self._is_expense(tx, holder.id):
                continue
            by_category.setdefault(tx.category_id, []).append(
                Expense(id=tx.id, date=tx.date, description=tx.description, amount=tx.amount)
            )

        out = []
        for cat in self.store.get_expense_categories():
            expenses = sorted(by_category.get(cat.id, []), key=lambda e: e.date, reverse=True)
            out.append(CategorySummary(
                id=cat.id,
                name=cat.name,
                expenses=tuple(expenses),
                total_spent=sum(e.amount for e in expenses),
            ))
        return sorted(out, key=lambda s: s.name.lower())
