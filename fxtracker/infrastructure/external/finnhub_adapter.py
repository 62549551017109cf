"""
FXTracker – Finnhub WebSocket Adapter (asíncrono)
==================================================
Mantiene UNA suscripción al universo fijo de pares sobre
wss://ws.finnhub.io?token=... y entrega lotes de ticks a un único
consumidor.

Ciclo de vida:
  1. connect(on_batch) → abre canal, envía un "subscribe" por instrumento,
                         lanza task de escucha
  2. _listen()         → parsear mensajes y entregar lotes "trade"
  3. _on_closed()      → cierre NO intencional → agenda UNA reconexión
  4. disconnect()      → cancela timer, "unsubscribe" por instrumento, cierra

RECONEXIÓN (delay fijo, por defecto 5s):
- Cualquier cierre que no venga de disconnect() agenda un reintento,
  sea cual sea el close code (incluido 1000).
- Antes de agendar se cancela el timer anterior → nunca hay más de UN
  timer pendiente.
- Un error de transporte NO agenda reconexión por sí mismo; solo el
  cierre resultante lo hace. Un open fallido cuenta como cierre.
- Al disparar, el timer verifica el estado: si entre medias hubo un
  disconnect() (estado DISCONNECTED) no reabre nada.

MENSAJES MAL FORMADOS:
- Se descartan sin notificar al consumidor ni propagar error; el canal
  sigue operando.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Awaitable, Callable, List, Optional

import websockets
from websockets.exceptions import ConnectionClosed

from fxtracker.application.ports.feed_connection import (
    BatchHandler,
    FeedConnectionError,
    IFeedConnection,
)
from fxtracker.domain.exceptions.domain_errors import MalformedMessageError
from fxtracker.domain.value_objects.connection_state import ConnectionState
from fxtracker.domain.value_objects.tick import Tick
from fxtracker.infrastructure.external.finnhub_messages import (
    parse_trade_message,
    subscribe_directive,
    unsubscribe_directive,
)
from fxtracker.shared.config.settings import Settings
from fxtracker.shared.logging.logger import get_logger

logger = get_logger("finnhub_adapter")

# Factory de transporte: recibe la URL y devuelve la conexión abierta
ConnectFn = Callable[[str], Awaitable[Any]]


class FinnhubFeedConnection(IFeedConnection):
    """
    Implementación de IFeedConnection sobre la API WebSocket de Finnhub.

    `connect_fn` permite inyectar un transporte falso en tests; por
    defecto es websockets.connect.
    """

    def __init__(self, settings: Settings, connect_fn: Optional[ConnectFn] = None) -> None:
        self._settings = settings
        self._connect_fn: ConnectFn = connect_fn or websockets.connect
        self._symbols: List[str] = list(settings.forex_symbols)

        self._ws: Any = None
        self._state = ConnectionState.DISCONNECTED
        self._handler: Optional[BatchHandler] = None
        self._listen_task: Optional[asyncio.Task] = None

        # Reconexión
        self._reconnect_handle: Optional[asyncio.TimerHandle] = None
        self._reconnect_task: Optional[asyncio.Task] = None
        self._reconnect_attempts = 0

        # Consumidor único vía subscribe()
        self._subscription: Optional[FeedSubscription] = None

        # Estadísticas de monitoreo
        self._messages_received = 0
        self._messages_dropped = 0
        self._ticks_received = 0
        self._batches_delivered = 0
        self._connected_since = 0.0
        self._last_error: Optional[str] = None

    # ════════════════════════════════════════════════════════════════
    #  IFeedConnection
    # ════════════════════════════════════════════════════════════════

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def symbols(self) -> List[str]:
        return list(self._symbols)

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_handle is not None

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    async def connect(self, on_batch: BatchHandler) -> None:
        """Abrir canal y suscribir. Idempotente mientras conecta/conectado."""
        if self._state in (ConnectionState.CONNECTING, ConnectionState.CONNECTED):
            logger.debug("connect() ignorado: estado=%s", self._state.value)
            return

        self._cancel_reconnect()
        self._handler = on_batch
        self._state = ConnectionState.CONNECTING
        logger.info("Conectando a Finnhub: %s", self._settings.finnhub_ws_url)

        try:
            ws = await self._connect_fn(self._settings.feed_url)
        except Exception as e:
            self._last_error = str(e) or e.__class__.__name__
            logger.error("No se pudo abrir el canal: %s", self._last_error)
            if self._state is ConnectionState.CONNECTING:
                self._schedule_reconnect()
            raise FeedConnectionError(f"Connection failed: {self._last_error}") from e

        if self._state is not ConnectionState.CONNECTING:
            # disconnect() llegó mientras se abría el canal
            logger.info("Canal abierto tras disconnect(); cerrando")
            await self._close_quietly(ws)
            return

        self._ws = ws
        self._state = ConnectionState.CONNECTED
        self._connected_since = time.time()
        logger.info("✓ Conectado a Finnhub WebSocket")

        await self._send_directives(ws, subscribe_directive)
        self._listen_task = asyncio.create_task(
            self._listen(ws), name="finnhub-listen"
        )

    async def disconnect(self) -> None:
        """Cierre intencional. Nunca va seguido de reconexión automática."""
        self._cancel_reconnect()
        self._state = ConnectionState.DISCONNECTED
        ws, self._ws = self._ws, None

        if ws is not None:
            logger.info("Desconectando de Finnhub...")
            await self._send_directives(ws, unsubscribe_directive)
            await self._close_quietly(ws)

        task, self._listen_task = self._listen_task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if ws is not None:
            logger.info(
                "Finnhub desconectado. Total ticks recibidos: %d", self._ticks_received
            )

    def is_connected(self) -> bool:
        return self._ws is not None and getattr(self._ws, "close_code", None) is None

    # ════════════════════════════════════════════════════════════════
    #  Consumidor único (FeedSubscription)
    # ════════════════════════════════════════════════════════════════

    async def subscribe(self) -> "FeedSubscription":
        """
        Conectar y devolver un iterador async de lotes.

        Solo se admite UN consumidor a la vez; unsubscribe() lo libera
        y cierra el canal.
        """
        if self._subscription is not None:
            raise RuntimeError("El feed ya tiene un consumidor suscrito")

        subscription = FeedSubscription(self, self._settings.subscription_queue_size)
        self._subscription = subscription
        try:
            await self.connect(subscription.push)
        except FeedConnectionError:
            self._subscription = None
            await self.disconnect()
            raise
        return subscription

    async def _release(self, subscription: "FeedSubscription") -> None:
        if self._subscription is subscription:
            self._subscription = None
            await self.disconnect()

    # ════════════════════════════════════════════════════════════════
    #  Listener
    # ════════════════════════════════════════════════════════════════

    async def _listen(self, ws: Any) -> None:
        """Loop de escucha hasta que el canal se cierre."""
        try:
            async for raw_msg in ws:
                await self._handle_message(raw_msg)
        except ConnectionClosed as e:
            self._last_error = str(e)
            logger.warning("Conexión cerrada: %s", e)
        except OSError as e:
            self._last_error = str(e)
            logger.error("Error de red: %s", e)
        except Exception as e:
            self._last_error = str(e)
            logger.error("Error inesperado en listener: %s", e, exc_info=True)
        finally:
            self._on_closed(ws)

    async def _handle_message(self, raw_msg: Any) -> None:
        self._messages_received += 1
        try:
            ticks = parse_trade_message(raw_msg)
        except MalformedMessageError as e:
            self._messages_dropped += 1
            logger.debug("Mensaje descartado: %s", e.message)
            return

        if not ticks or self._handler is None:
            return

        self._ticks_received += len(ticks)
        self._batches_delivered += 1
        try:
            result = self._handler(ticks)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error("Error en consumidor de lotes: %s", e, exc_info=True)

    def _on_closed(self, ws: Any) -> None:
        """Cierre del canal: decide si se agenda reconexión."""
        if ws is not self._ws:
            # Canal antiguo o cierre intencional (disconnect ya soltó el ws)
            return
        self._ws = None
        if self._state is ConnectionState.DISCONNECTED:
            return

        logger.warning(
            "Canal cerrado (code=%s reason=%s) – reconexión en %.1fs",
            getattr(ws, "close_code", None),
            getattr(ws, "close_reason", None) or "",
            self._settings.ws_reconnect_delay,
        )
        self._schedule_reconnect()

    # ════════════════════════════════════════════════════════════════
    #  Reconexión
    # ════════════════════════════════════════════════════════════════

    def _schedule_reconnect(self) -> None:
        self._cancel_reconnect()
        self._state = ConnectionState.RECONNECTING
        loop = asyncio.get_running_loop()
        self._reconnect_handle = loop.call_later(
            self._settings.ws_reconnect_delay, self._fire_reconnect
        )

    def _cancel_reconnect(self) -> None:
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

    def _fire_reconnect(self) -> None:
        self._reconnect_handle = None
        if self._state is not ConnectionState.RECONNECTING or self._handler is None:
            return
        self._reconnect_task = asyncio.create_task(
            self._reconnect(self._handler), name="finnhub-reconnect"
        )

    async def _reconnect(self, handler: BatchHandler) -> None:
        self._reconnect_attempts += 1
        logger.info("Reconectando (intento #%d)...", self._reconnect_attempts)
        try:
            await self.connect(handler)
        except FeedConnectionError as e:
            # connect() ya agendó el siguiente intento
            logger.warning("Reintento fallido: %s", e)

    # ════════════════════════════════════════════════════════════════
    #  Helpers
    # ════════════════════════════════════════════════════════════════

    async def _send_directives(self, ws: Any, build: Callable[[str], str]) -> None:
        """Una directiva por instrumento. Best-effort: fallos de envío se ignoran."""
        for symbol in self._symbols:
            try:
                await ws.send(build(symbol))
            except Exception as e:
                logger.debug("Fallo al enviar directiva para '%s': %s", symbol, e)

    async def _close_quietly(self, ws: Any) -> None:
        try:
            await ws.close()
        except Exception as e:
            logger.debug("Error cerrando canal: %s", e)

    # ════════════════════════════════════════════════════════════════
    #  Stats
    # ════════════════════════════════════════════════════════════════

    @property
    def stats(self) -> dict:
        """Estadísticas del adaptador para monitoreo."""
        return {
            "state": self._state.value,
            "connected": self.is_connected(),
            "messages_received": self._messages_received,
            "messages_dropped": self._messages_dropped,
            "ticks_received": self._ticks_received,
            "batches_delivered": self._batches_delivered,
            "connected_since": self._connected_since,
            "reconnect_attempts": self._reconnect_attempts,
            "reconnect_pending": self.reconnect_pending,
            "last_error": self._last_error,
            "subscribed_symbols": len(self._symbols),
        }


_CLOSED = object()


class FeedSubscription:
    """
    Iterador async de lotes de ticks para UN consumidor.

        subscription = await feed.subscribe()
        async for batch in subscription:
            ...
        await subscription.unsubscribe()

    CÓMO SE PROTEGE MEMORIA:
    - Cola acotada (subscription_queue_size) con política drop-oldest:
      si el consumidor es lento se descarta el lote MÁS ANTIGUO y el
      listener del WebSocket nunca se bloquea.
    """

    def __init__(self, feed: FinnhubFeedConnection, max_queue_size: int) -> None:
        self._feed = feed
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue_size)
        self._closed = False
        self._dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dropped(self) -> int:
        return self._dropped

    def push(self, batch: List[Tick]) -> None:
        """Handler registrado en el feed."""
        if self._closed:
            return
        self._put(batch)

    def _put(self, item: Any) -> None:
        if self._queue.full():
            try:
                self._queue.get_nowait()
                self._dropped += 1
                logger.warning("Cola de suscripción llena – lote antiguo descartado")
            except asyncio.QueueEmpty:
                pass
        self._queue.put_nowait(item)

    def __aiter__(self) -> "FeedSubscription":
        return self

    async def __anext__(self) -> List[Tick]:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item

    async def unsubscribe(self) -> None:
        """Soltar el feed y terminar la iteración."""
        if self._closed:
            return
        self._closed = True
        self._put(_CLOSED)
        await self._feed._release(self)
