"""
FXTracker – Domain Service: Trade Reconciler
=============================================
Integra lotes de ticks en la tabla de último precio por símbolo.

FÓRMULA DEL CAMBIO:

    change% = (price - prev_price) / prev_price × 100   (redondeado a 3 dec.)
    change% = 0                                          si prev_price == 0

    Ejemplo: 1.1000 → 1.1050 → +0.455%  (UP)
    Ejemplo: 1.1050 → 1.1025 → -0.226%  (DOWN)

    Primer tick de un símbolo: change% = None, direction = NONE.

ORDEN:
  Los ticks se procesan en el orden del lote. NO se compara el
  timestamp con el registro anterior: un tick más antiguo igualmente
  sobrescribe (last-write-wins). Reproducir el mismo lote dos veces
  desde una tabla vacía deja la misma tabla final.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from fxtracker.domain.value_objects.tick import Direction, PriceRecord, Tick
from fxtracker.shared.logging.logger import get_logger

logger = get_logger("trade_reconciler")

CHANGE_DECIMALS = 3


def compute_change(prev_price: float, price: float) -> float:
    """Cambio porcentual redondeado entre dos precios."""
    if prev_price == 0:
        return 0.0
    change = (price - prev_price) / prev_price * 100.0
    # + 0.0 normaliza -0.0
    return round(change, CHANGE_DECIMALS) + 0.0


def direction_of(change_percent: Optional[float]) -> Direction:
    if change_percent is None:
        return Direction.NONE
    if change_percent > 0:
        return Direction.UP
    if change_percent < 0:
        return Direction.DOWN
    return Direction.NONE


class TradeReconciler:
    """
    Servicio puro: recibe la tabla de precios (del TrackerContext) y la
    actualiza in-place con cada tick del lote.

    Invariante: exactamente un PriceRecord por símbolo.
    """

    def __init__(self) -> None:
        self._ticks_applied = 0

    def reconcile(self, table: Dict[str, PriceRecord], tick: Tick) -> PriceRecord:
        """Integrar UN tick y devolver el registro resultante."""
        previous = table.get(tick.symbol)
        if previous is None:
            record = PriceRecord(tick=tick)
        else:
            change = compute_change(previous.price, tick.price)
            record = PriceRecord(
                tick=tick,
                change_percent=change,
                direction=direction_of(change),
            )
        table[tick.symbol] = record
        self._ticks_applied += 1
        return record

    def apply_batch(
        self, table: Dict[str, PriceRecord], ticks: Iterable[Tick],
    ) -> list[PriceRecord]:
        """Integrar un lote completo en orden de llegada."""
        records = [self.reconcile(table, tick) for tick in ticks]
        logger.debug("Lote integrado: %d ticks", len(records))
        return records

    @property
    def ticks_applied(self) -> int:
        return self._ticks_applied
