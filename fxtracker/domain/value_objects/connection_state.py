"""
FXTracker – Domain Value Object: ConnectionState
=================================================
Máquina de estados explícita de la conexión al feed.

TRANSICIONES:

  DISCONNECTED ──connect()──▸ CONNECTING ──open OK──▸ CONNECTED
        ▲                         │                      │
        │                    open falla             cierre no
        │                         │                 intencional
        │                         ▼                      │
        │                    RECONNECTING ◂──────────────┘
        │                         │
        │                   timer dispara ──▸ CONNECTING
        │
        └──── disconnect() desde CUALQUIER estado (cancela el timer)

El cierre intencional se distingue porque disconnect() fija
DISCONNECTED ANTES de cerrar el canal; el handler de cierre ve ese
estado y no agenda reconexión.
"""

from __future__ import annotations

from enum import Enum


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
