import itertools

from tbo.domain.balances import balance_rows, compute_balances, currency_totals, sort_for_display
from tbo.domain.models import Person, Transaction


def _tx(i, type, amount, currency="USD", **kw):
    return Transaction(id=str(i), date="2024-01-01", type=type, amount=amount, currency=currency, **kw)


PERSONS = [Person(id=1, name="A"), Person(id=2, name="B")]


def test_payment_in_credits_entity():
    out = compute_balances([Person(id=1, name="A")], [_tx(1, "PaymentIn", 100, entity_id=1)])
    assert out[1] == {"USD": 100, "CNY": 0, "IRT": 0}


def test_payment_out_debits_entity():
    txs = [_tx(1, "PaymentIn", 100, entity_id=1), _tx(2, "PaymentOut", 30, entity_id=1)]
    out = compute_balances([Person(id=1, name="A")], txs)
    assert out[1]["USD"] == 70


def test_conversion_moves_between_currencies_at_rate():
    txs = [
        _tx(1, "PaymentIn", 100, entity_id=1),
        _tx(2, "Conversion", 10, entity_id=1, to_currency="CNY", rate=7),
    ]
    out = compute_balances(PERSONS, txs)
    assert out[1]["USD"] == 90
    assert out[1]["CNY"] == 70
    assert out[2] == {"USD": 0, "CNY": 0, "IRT": 0}


def test_conversion_rate_defaults_to_one():
    out = compute_balances(PERSONS, [_tx(1, "Conversion", 25, entity_id=1, to_currency="IRT")])
    assert out[1]["USD"] == -25
    assert out[1]["IRT"] == 25


def test_conversion_without_target_currency_is_skipped():
    out = compute_balances(PERSONS, [_tx(1, "Conversion", 25, entity_id=1, rate=3)])
    assert out[1] == {"USD": 0, "CNY": 0, "IRT": 0}


def test_internal_transfer_is_zero_sum():
    txs = [_tx(1, "InternalTransfer", 50, from_entity_id=1, to_entity_id=2)]
    out = compute_balances(PERSONS, txs)
    assert out[1]["USD"] == -50
    assert out[2]["USD"] == 50
    assert sum(b["USD"] for b in out.values()) == 0


def test_persons_without_transactions_are_zero():
    out = compute_balances(PERSONS + [Person(id=9, name="Idle")], [_tx(1, "PaymentIn", 5, entity_id=1)])
    assert out[9] == {"USD": 0, "CNY": 0, "IRT": 0}


def test_dangling_and_missing_ids_are_skipped():
    txs = [
        _tx(1, "PaymentIn", 10, entity_id=42),
        _tx(2, "PaymentOut", 10),
        _tx(3, "InternalTransfer", 7, from_entity_id=1, to_entity_id=42),
        _tx(4, "InternalTransfer", 3, to_entity_id=2),
    ]
    out = compute_balances(PERSONS, txs)
    assert out[1]["USD"] == -7
    assert out[2]["USD"] == 3
    assert 42 not in out


def test_order_independence_and_idempotence():
    txs = [
        _tx(1, "PaymentIn", 100, entity_id=1),
        _tx(2, "PaymentOut", 40, currency="CNY", entity_id=2),
        _tx(3, "InternalTransfer", 15, from_entity_id=1, to_entity_id=2),
        _tx(4, "Conversion", 20, entity_id=1, to_currency="IRT", rate=4),
    ]
    expected = compute_balances(PERSONS, txs)
    assert compute_balances(PERSONS, txs) == expected
    for perm in itertools.permutations(txs):
        assert compute_balances(PERSONS, list(perm)) == expected


def test_sort_for_display_puts_zero_rows_last_and_truncates():
    persons = [Person(id=i, name=f"P{i}") for i in range(1, 5)]
    txs = [_tx(1, "PaymentIn", 1, entity_id=2), _tx(2, "PaymentOut", 1, currency="IRT", entity_id=4)]
    rows = sort_for_display(balance_rows(persons, txs))
    assert [r.person_id for r in rows] == [2, 4, 1, 3]
    assert [r.person_id for r in sort_for_display(balance_rows(persons, txs), limit=3)] == [2, 4, 1]


def test_sort_for_display_limit_zero_returns_no_rows():
    persons = [Person(id=i, name=f"P{i}") for i in range(1, 4)]
    rows = balance_rows(persons, [_tx(1, "PaymentIn", 5, entity_id=1)])
    assert sort_for_display(rows, limit=0) == []
    assert len(sort_for_display(rows, limit=None)) == 3


def test_rounding_leftovers_count_as_settled():
    txs = [
        _tx(1, "PaymentIn", 0.1, entity_id=1),
        _tx(2, "PaymentIn", 0.2, entity_id=1),
        _tx(3, "PaymentOut", 0.3, entity_id=1),
        _tx(4, "PaymentIn", 0.01, entity_id=2),
    ]
    rows = balance_rows(PERSONS, txs)
    assert rows[0].balances["USD"] != 0
    assert rows[0].is_zero
    assert not rows[1].is_zero
    assert [r.person_id for r in sort_for_display(rows)] == [2, 1]


def test_currency_totals_ignore_transfers_and_conversions():
    txs = [
        _tx(1, "PaymentIn", 100, entity_id=1),
        _tx(2, "PaymentOut", 30, entity_id=2),
        _tx(3, "PaymentIn", 500, currency="CNY", entity_id=1),
        _tx(4, "InternalTransfer", 50, from_entity_id=1, to_entity_id=2),
        _tx(5, "Conversion", 10, entity_id=1, to_currency="IRT", rate=2),
    ]
    assert currency_totals(txs) == {"USD": 70, "CNY": 500, "IRT": 0}
