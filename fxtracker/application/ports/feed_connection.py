"""
FXTracker – Application Port: Feed Connection
==============================================
Interfaz para la suscripción al feed de precios en tiempo real.

Los use cases piden conectar/desconectar; la infraestructura
decide CÓMO (WebSocket Finnhub, replay de fichero, mock de tests...).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Union

from fxtracker.domain.value_objects.connection_state import ConnectionState
from fxtracker.domain.value_objects.tick import Tick

# Handler de lotes: puede ser función normal o coroutine
BatchHandler = Callable[[List[Tick]], Union[None, Awaitable[Any]]]


class FeedConnectionError(Exception):
    """
    El transporte no pudo abrirse o falló estando abierto.

    No es fatal: se registra como last_error y la conexión sigue
    siendo elegible para reintento automático o manual.
    """

    code = "FEED_CONNECTION_ERROR"

    def to_dict(self) -> dict:
        return {"error": self.code, "message": str(self)}


class IFeedConnection(ABC):
    """
    Interfaz de la conexión al feed.

    IMPLEMENTACIONES POSIBLES:
    - FinnhubFeedConnection (real-time)
    - Fake de tests
    """

    @property
    @abstractmethod
    def state(self) -> ConnectionState:
        """Estado actual de la máquina de estados."""
        pass

    @abstractmethod
    async def connect(self, on_batch: BatchHandler) -> None:
        """
        Abre el canal y suscribe el universo de instrumentos.

        No-op si ya está conectado o hay un intento en curso.

        Raises:
            FeedConnectionError: si el transporte no pudo abrirse
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Cierre intencional: cancela reconexión, desuscribe y cierra."""
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """True si el canal está abierto ahora mismo."""
        pass
