from __future__ import annotations

from typing import Iterable, Optional

from tbo.domain.models import (
    CONVERSION,
    CURRENCIES,
    INTERNAL_TRANSFER,
    PAYMENT_IN,
    PAYMENT_OUT,
    BalanceRow,
    Person,
    Transaction,
)


def empty_balance() -> dict[str, float]:
    return {code: 0.0 for code in CURRENCIES}


def compute_balances(persons: Iterable[Person], transactions: Iterable[Transaction]) -> dict[int, dict[str, float]]:
    """
    Fold the transaction log into a signed balance per person and currency.

    Every person appears in the result, even without transactions. A side of a
    transaction that names a missing or unknown person is skipped; nothing here
    raises.
    """
    balances = {int(p.id): empty_balance() for p in persons}

    def apply(entity_id: Optional[int], currency: Optional[str], delta: float) -> None:
        if entity_id is None or currency not in CURRENCIES:
            return
        account = balances.get(entity_id)
        if account is None:
            return
        account[currency] += delta

    for tx in transactions:
        amount = float(tx.amount)
        if tx.type == PAYMENT_IN:
            apply(tx.entity_id, tx.currency, amount)
        elif tx.type == PAYMENT_OUT:
            apply(tx.entity_id, tx.currency, -amount)
        elif tx.type == INTERNAL_TRANSFER:
            apply(tx.from_entity_id, tx.currency, -amount)
            apply(tx.to_entity_id, tx.currency, amount)
        elif tx.type == CONVERSION:
            if tx.to_currency is None:
                continue
            rate = 1.0 if tx.rate is None else float(tx.rate)
            apply(tx.entity_id, tx.currency, -amount)
            apply(tx.entity_id, tx.to_currency, amount * rate)

    return balances


def balance_rows(persons: Iterable[Person], transactions: Iterable[Transaction]) -> list[BalanceRow]:
    persons = list(persons)
    balances = compute_balances(persons, transactions)
    return [BalanceRow(person_id=p.id, person_name=p.name, balances=balances[int(p.id)]) for p in persons]


def sort_for_display(rows: Iterable[BalanceRow], limit: Optional[int] = None) -> list[BalanceRow]:
    # stable: non-zero rows keep their relative order, all-zero rows go last
    ordered = sorted(rows, key=lambda r: r.is_zero)
    if limit is not None:
        return ordered[:limit]
    return ordered


def currency_totals(transactions: Iterable[Transaction]) -> dict[str, float]:
    """Net PaymentIn minus PaymentOut per currency; conversions and transfers are ignored."""
    totals = empty_balance()
    for tx in transactions:
        if tx.currency not in totals:
            continue
        if tx.type == PAYMENT_IN:
            totals[tx.currency] += float(tx.amount)
        elif tx.type == PAYMENT_OUT:
            totals[tx.currency] -= float(tx.amount)
    return totals
