"""
FXTracker – Tracker Context
============================
Estado en memoria de la aplicación, explícito y pasado a cada operación.

Contiene:
  - prices:         tabla de último precio por símbolo (PriceRecord)
  - holdings:       lista de posiciones del usuario
  - selected_pairs: símbolos marcados por el usuario para seguimiento
  - connection:     estado visible de la conexión (connecting/connected/error)

No hay store global: el Container crea UN contexto y lo inyecta en
reconciler, valuator, supervisor y use cases.

RACE CONDITIONS:
- Todas las operaciones se ejecutan dentro del mismo event loop asyncio.
- No hay threads → no hay race conditions para atributos simples.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fxtracker.domain.entities.holding import Holding
from fxtracker.domain.value_objects.connection_state import ConnectionState
from fxtracker.domain.value_objects.tick import PriceRecord


@dataclass
class ConnectionStatus:
    """Estado de conexión tal como lo ve el consumidor."""

    state: ConnectionState = ConnectionState.DISCONNECTED
    connecting: bool = False
    connected: bool = False
    last_error: Optional[str] = None

    def reset(self) -> None:
        self.state = ConnectionState.DISCONNECTED
        self.connecting = False
        self.connected = False
        self.last_error = None

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "connecting": self.connecting,
            "connected": self.connected,
            "last_error": self.last_error,
        }


@dataclass
class TrackerContext:
    """Contenedor del estado mutable de la aplicación."""

    prices: Dict[str, PriceRecord] = field(default_factory=dict)
    holdings: List[Holding] = field(default_factory=list)
    selected_pairs: List[str] = field(default_factory=list)
    connection: ConnectionStatus = field(default_factory=ConnectionStatus)

    def get_price(self, symbol: str) -> Optional[PriceRecord]:
        return self.prices.get(symbol)

    def clear_trades(self) -> None:
        """Vaciar la tabla de precios."""
        self.prices.clear()

    def clear_all(self) -> None:
        """Reset completo: precios, holdings, selección y conexión."""
        self.clear_trades()
        self.holdings.clear()
        self.selected_pairs.clear()
        self.connection.reset()
