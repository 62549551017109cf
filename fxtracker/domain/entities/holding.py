"""
FXTracker – Domain Entity: Holding
===================================
Posición del usuario en un par de divisas, a precio medio ponderado.

CICLO DE VIDA:
  primera compra de un símbolo ──▸ Holding nuevo (avg = precio actual)
  compras siguientes           ──▸ merge en el MISMO holding
                                    (media ponderada por volumen)
  venta explícita              ──▸ se elimina el holding completo

INVARIANTES:
  - Un solo Holding por símbolo.
  - volume > 0 siempre: el merge solo suma volumen positivo y la
    eliminación borra el holding entero (nunca se divide).

POR QUÉ frozen=True:
  El merge produce un Holding NUEVO con dataclasses.replace() y lo
  sustituye en la misma posición de la lista. Así un ValuatedHolding
  calculado antes nunca ve cambiar sus datos por debajo.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


def new_holding_id() -> str:
    """ID opaco y único para un holding."""
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True, slots=True)
class Holding:
    """Posición abierta en un símbolo."""

    symbol: str
    average_purchase_price: float
    volume: float
    purchase_date: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    id: str = field(default_factory=new_holding_id)

    def cost_basis(self) -> float:
        """Coste total de la posición: avg × volume."""
        return self.average_purchase_price * self.volume


@dataclass(frozen=True, slots=True)
class ValuatedHolding:
    """Holding + cifras de valoración contra la tabla de precios actual."""

    holding: Holding
    current_price: float
    total_value: float
    profit_loss: float
    profit_loss_percent: float

    def to_dict(self) -> dict:
        """Serialización para API."""
        h = self.holding
        return {
            "id": h.id,
            "symbol": h.symbol,
            "average_purchase_price": h.average_purchase_price,
            "volume": h.volume,
            "purchase_date": h.purchase_date.isoformat(),
            "current_price": self.current_price,
            "total_value": self.total_value,
            "profit_loss": self.profit_loss,
            "profit_loss_percent": self.profit_loss_percent,
        }
