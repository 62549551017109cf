"""
FXTracker – Finnhub wire messages
==================================
Construcción de directivas salientes y parsing de mensajes entrantes.

SALIENTES:
    {"type": "subscribe",   "symbol": "OANDA:EUR_USD"}
    {"type": "unsubscribe", "symbol": "OANDA:EUR_USD"}

ENTRANTES (solo se procesan los de tipo "trade"):
    {"type": "trade", "data": [{"s": ..., "p": ..., "t": ..., "v": ..., "c": [...]}]}

Finnhub también envía {"type": "ping"} y mensajes de error; se ignoran.
"""

from __future__ import annotations

import json
from typing import List, Union

from fxtracker.domain.exceptions.domain_errors import MalformedMessageError
from fxtracker.domain.value_objects.tick import Tick


def subscribe_directive(symbol: str) -> str:
    return json.dumps({"type": "subscribe", "symbol": symbol})


def unsubscribe_directive(symbol: str) -> str:
    return json.dumps({"type": "unsubscribe", "symbol": symbol})


def parse_trade_message(raw: Union[str, bytes]) -> List[Tick]:
    """
    Parsear un mensaje crudo del WebSocket.

    Returns:
        Lista de ticks. Vacía si el mensaje no es "trade" o no trae datos.

    Raises:
        MalformedMessageError: JSON inválido o payload "trade" corrupto.
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, TypeError, UnicodeDecodeError) as e:
        raise MalformedMessageError(f"Mensaje no-JSON: {e}", raw=raw) from e

    if not isinstance(payload, dict):
        raise MalformedMessageError("Mensaje JSON no es un objeto", raw=raw)

    if payload.get("type") != "trade":
        return []

    data = payload.get("data")
    if not data:
        return []
    if not isinstance(data, list):
        raise MalformedMessageError("'data' no es una lista", raw=raw)

    try:
        return [Tick.from_wire(item) for item in data]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise MalformedMessageError(f"Tick inválido: {e}", raw=raw) from e
