"""Tests del TradeReconciler y del cálculo de cambio porcentual"""

from fxtracker.domain.services.trade_reconciler import compute_change, direction_of
from fxtracker.domain.value_objects.tick import Direction, Tick

from tests.fakes import EUR_USD, GBP_USD


def _tick(price, t, symbol=EUR_USD):
    return Tick(symbol=symbol, price=price, timestamp_ms=t)


def test_sequence_of_ticks_produces_change_and_direction(reconciler):
    """1.1000 → 1.1050 → 1.1025 da none/up/down con +0.455 y -0.226"""
    table = {}
    records = reconciler.apply_batch(
        table, [_tick(1.1000, 1), _tick(1.1050, 2), _tick(1.1025, 3)]
    )

    assert [r.direction for r in records] == [Direction.NONE, Direction.UP, Direction.DOWN]
    assert [r.change_percent for r in records] == [None, 0.455, -0.226]
    assert table[EUR_USD].price == 1.1025
    assert len(table) == 1


def test_first_tick_has_no_change(reconciler):
    table = {}
    record = reconciler.reconcile(table, _tick(1.25, 1, GBP_USD))

    assert record.change_percent is None
    assert record.direction is Direction.NONE


def test_previous_price_zero_gives_zero_change(reconciler):
    """Con precio previo 0 el cambio es 0 y no hay dirección"""
    table = {}
    reconciler.reconcile(table, _tick(0.0, 1))
    record = reconciler.reconcile(table, _tick(1.1, 2))

    assert record.change_percent == 0.0
    assert record.direction is Direction.NONE


def test_older_timestamp_still_overwrites(reconciler):
    """Last-write-wins: el timestamp no se usa para descartar ticks"""
    table = {}
    reconciler.reconcile(table, _tick(1.10, 2000))
    reconciler.reconcile(table, _tick(1.20, 1000))

    assert table[EUR_USD].price == 1.20
    assert table[EUR_USD].timestamp_ms == 1000


def test_replaying_batch_is_deterministic(reconciler):
    batch = [_tick(1.1, 1), _tick(1.3, 2, GBP_USD), _tick(1.2, 3)]
    first, second = {}, {}
    reconciler.apply_batch(first, batch)
    reconciler.apply_batch(second, batch)

    assert first == second
    assert reconciler.ticks_applied == 6


def test_unchanged_price_is_zero_without_direction():
    assert compute_change(1.1, 1.1) == 0.0
    assert direction_of(0.0) is Direction.NONE


def test_tiny_negative_change_rounds_to_positive_zero():
    """Un cambio que redondea a 0 no deja -0.0"""
    change = compute_change(1.0, 0.9999999)
    assert change == 0.0
    assert str(change) == "0.0"
    assert direction_of(change) is Direction.NONE


def test_price_record_to_dict(reconciler):
    table = {}
    reconciler.reconcile(table, _tick(1.1, 1))
    data = reconciler.reconcile(table, _tick(1.1050, 2)).to_dict()

    assert data["symbol"] == EUR_USD
    assert data["change_percent"] == 0.455
    assert data["direction"] == "up"
