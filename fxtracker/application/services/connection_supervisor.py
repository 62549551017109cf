"""
FXTracker – Connection Supervisor
==================================
Puente entre el ciclo de vida del feed y el del consumidor (lifespan de
la API, una vista, un script...).

  start()  → connecting=True, limpia last_error, feed.connect(handler)
             OK    → connected=True
             error → last_error registrado, connected=False
             siempre → connecting=False
  stop()   → baja el flag de vida, feed.disconnect(), connected=False
  check_connection() → sincroniza connected con feed.is_connected()

FLAG DE VIDA:
  El handler registrado en el feed comprueba `_alive` antes de pasar
  el lote al TradeReconciler. Un lote que llega después de stop() se
  DESCARTA (no se encola ni se reproduce después).

REENTRADA:
  Dos start() casi simultáneos → un solo intento de conexión: el
  primero marca connecting=True antes del primer await.
"""

from __future__ import annotations

from typing import List

from fxtracker.application.ports.feed_connection import FeedConnectionError, IFeedConnection
from fxtracker.application.state.tracker_context import TrackerContext
from fxtracker.domain.services.trade_reconciler import TradeReconciler
from fxtracker.domain.value_objects.connection_state import ConnectionState
from fxtracker.domain.value_objects.tick import Tick
from fxtracker.shared.logging.logger import get_logger

logger = get_logger("connection_supervisor")


class ConnectionSupervisor:
    """Orquesta FeedConnection → TradeReconciler sobre un TrackerContext."""

    def __init__(
        self,
        feed: IFeedConnection,
        reconciler: TradeReconciler,
        context: TrackerContext,
    ) -> None:
        self._feed = feed
        self._reconciler = reconciler
        self._context = context
        self._alive = False
        self._late_batches_dropped = 0

    @property
    def alive(self) -> bool:
        return self._alive

    @property
    def late_batches_dropped(self) -> int:
        return self._late_batches_dropped

    async def start(self) -> None:
        status = self._context.connection
        if status.connecting or status.connected:
            logger.debug("start() ignorado: ya conectando/conectado")
            return

        status.connecting = True
        status.last_error = None
        status.state = ConnectionState.CONNECTING
        self._alive = True
        try:
            await self._feed.connect(self._on_batch)
            status.connected = self._alive and self._feed.is_connected()
        except FeedConnectionError as e:
            status.last_error = str(e) or "Connection failed"
            status.connected = False
            logger.error("Fallo al conectar con el feed: %s", status.last_error)
        finally:
            status.connecting = False
            status.state = self._feed.state

    async def stop(self) -> None:
        self._alive = False
        status = self._context.connection
        try:
            await self._feed.disconnect()
        finally:
            status.connected = False
            status.state = ConnectionState.DISCONNECTED

    def check_connection(self) -> bool:
        connected = self._feed.is_connected()
        status = self._context.connection
        status.connected = connected
        status.state = self._feed.state
        return connected

    def _on_batch(self, ticks: List[Tick]) -> None:
        if not self._alive:
            self._late_batches_dropped += 1
            logger.debug("Lote tardío descartado (%d ticks)", len(ticks))
            return
        self._reconciler.apply_batch(self._context.prices, ticks)
