from __future__ import annotations

import logging
import math
from datetime import date
from typing import Optional

from tbo.domain.errors import NotFoundError, ValidationError
from tbo.domain.models import (
    CONVERSION,
    CURRENCIES,
    INTERNAL_TRANSFER,
    TRANSACTION_TYPES,
    Transaction,
)
from tbo.repositories.memory_store import MemoryStore
from tbo.services.pagination import Page, paginate

log = logging.getLogger("tbo.ledger")


def parse_iso_date(value: str, field: str) -> str:
    try:
        return date.fromisoformat(value.strip()).isoformat()
    except (AttributeError, ValueError):
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD).")


def validate_transaction(tx: Transaction) -> None:
    if tx.type not in TRANSACTION_TYPES:
        raise ValidationError(f"Unknown transaction type: {tx.type}")
    if tx.currency not in CURRENCIES:
        raise ValidationError(f"Unknown currency: {tx.currency}")
    if not math.isfinite(float(tx.amount)):
        raise ValidationError("Amount must be a finite number.")
    if float(tx.amount) < 0:
        raise ValidationError("Amount must be >= 0.")
    parse_iso_date(tx.date, "Date")

    if tx.type == INTERNAL_TRANSFER:
        if tx.from_entity_id is None or tx.to_entity_id is None:
            raise ValidationError("Internal transfers need both a source and a target person.")
    elif tx.entity_id is None:
        raise ValidationError("Select a person account.")

    if tx.type == CONVERSION:
        if tx.to_currency not in CURRENCIES:
            raise ValidationError("Conversions need a target currency.")
        if tx.rate is not None and not math.isfinite(float(tx.rate)):
            raise ValidationError("Rate must be a finite number.")
        if tx.rate is not None and float(tx.rate) <= 0:
            raise ValidationError("Rate must be > 0.")


class TransactionService:
    def __init__(self, store: MemoryStore, page_size: int = 10):
        self.store = store
        self.page_size = page_size

    def list_transactions(self) -> list[Transaction]:
        return self.store.get_transactions()

    def get_transaction(self, transaction_id: str) -> Transaction:
        for tx in self.store.get_transactions():
            if tx.id == transaction_id:
                return tx
        raise NotFoundError("Transaction not found.")

    def add_transaction(
        self,
        type: str,
        amount: float,
        currency: str,
        *,
        date: Optional[str] = None,
        description: str = "",
        entity_id: Optional[int] = None,
        from_entity_id: Optional[int] = None,
        to_entity_id: Optional[int] = None,
        rate: Optional[float] = None,
        to_currency: Optional[str] = None,
        category_id: Optional[str] = None,
        id_suffix: str = "",
    ) -> Transaction:
        try:
            amount = float(amount)
            rate = float(rate) if rate is not None else None
        except (TypeError, ValueError):
            raise ValidationError("Amount and rate must be numbers.")

        tx = Transaction(
            id=f"{self.store.new_id()}{id_suffix}",
            date=(date or _today()).strip(),
            type=type,
            amount=amount,
            currency=currency,
            description=(description or "").strip(),
            entity_id=_opt_int(entity_id),
            from_entity_id=_opt_int(from_entity_id),
            to_entity_id=_opt_int(to_entity_id),
            rate=rate,
            to_currency=to_currency or None,
            category_id=category_id,
        )
        validate_transaction(tx)

        self.store.set_transactions([tx, *self.store.get_transactions()])
        log.info("transaction_added id=%s type=%s amount=%.2f currency=%s", tx.id, tx.type, tx.amount, tx.currency)
        return tx

    def update_transaction(self, tx: Transaction) -> Transaction:
        """Full replace by id."""
        self.get_transaction(tx.id)
        validate_transaction(tx)
        self.store.set_transactions([tx if t.id == tx.id else t for t in self.store.get_transactions()])
        log.info("transaction_updated id=%s", tx.id)
        return tx

    def delete_transaction(self, transaction_id: str) -> None:
        self.get_transaction(transaction_id)
        self.store.set_transactions([t for t in self.store.get_transactions() if t.id != transaction_id])
        log.info("transaction_deleted id=%s", transaction_id)

    def filter_transactions(
        self,
        type: Optional[str] = None,
        currency: Optional[str] = None,
        person_id: Optional[int] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> list[Transaction]:
        rows = []
        for tx in self.store.get_transactions():
            if type and tx.type != type:
                continue
            if currency and tx.currency != currency:
                continue
            if date_from and tx.date < date_from:
                continue
            if date_to and tx.date > date_to:
                continue
            if person_id is not None and not tx.touches(int(person_id)):
                continue
            rows.append(tx)
        rows.sort(key=lambda t: t.date, reverse=True)
        return rows

    def list_page(self, page: int = 1, per_page: Optional[int] = None, **filters) -> Page[Transaction]:
        return paginate(self.filter_transactions(**filters), page, per_page or self.page_size)


def _today() -> str:
    return date.today().isoformat()


def _opt_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("Person ids must be integers.")
