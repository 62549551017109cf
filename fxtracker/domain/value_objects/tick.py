"""
FXTracker – Domain Value Objects: Tick / PriceRecord
=====================================================
Representa un tick de mercado individual recibido de Finnhub y el
último precio conocido por símbolo.

- frozen=True → inmutable, seguro para pasar entre coroutines.
- slots=True  → menor footprint de memoria en hot-path.

FORMATO DE ENTRADA (un elemento de "data" en un mensaje "trade"):
    {"s": "OANDA:EUR_USD", "p": 1.1050, "t": 1700000000000, "v": 0, "c": [...]}
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Direction(str, Enum):
    """Dirección del último movimiento de precio."""
    UP = "up"
    DOWN = "down"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class Tick:
    """Observación de precio atómica recibida del feed."""

    symbol: str                      # Finnhub symbol id (e.g. "OANDA:EUR_USD")
    price: float                     # precio observado (>= 0)
    timestamp_ms: int                # epoch en milisegundos
    volume: float = 0.0
    conditions: Optional[Tuple[str, ...]] = None

    @classmethod
    def from_wire(cls, raw: dict) -> "Tick":
        """
        Construye un Tick desde el payload compacto de Finnhub.

        Raises:
            KeyError / TypeError / ValueError si el payload no es válido.
        """
        price = float(raw["p"])
        if not math.isfinite(price):
            raise ValueError(f"Precio no finito: {price}")
        if price < 0:
            raise ValueError(f"Precio negativo: {price}")
        conditions = raw.get("c")
        return cls(
            symbol=str(raw["s"]),
            price=price,
            timestamp_ms=int(raw["t"]),
            volume=float(raw.get("v") or 0.0),
            conditions=tuple(str(c) for c in conditions) if conditions else None,
        )

    def to_dict(self) -> dict:
        """Serialización para API / frontend."""
        return {
            "symbol": self.symbol,
            "price": self.price,
            "timestamp_ms": self.timestamp_ms,
            "volume": self.volume,
            "conditions": list(self.conditions) if self.conditions else None,
        }


@dataclass(frozen=True, slots=True)
class PriceRecord:
    """
    Último precio conocido de un símbolo + cambio derivado.

    Se reemplaza completo en cada tick (last-write-wins). El timestamp
    es informativo: NO se usa para rechazar ticks fuera de orden.
    """

    tick: Tick
    change_percent: Optional[float] = None
    direction: Direction = Direction.NONE

    @property
    def symbol(self) -> str:
        return self.tick.symbol

    @property
    def price(self) -> float:
        return self.tick.price

    @property
    def timestamp_ms(self) -> int:
        return self.tick.timestamp_ms

    def to_dict(self) -> dict:
        data = self.tick.to_dict()
        data["change_percent"] = self.change_percent
        data["direction"] = self.direction.value
        return data
