"""
FXTracker – Settings (Pydantic BaseSettings)
=============================================
Configuración centralizada cargada desde variables de entorno / .env.
Se usa pydantic-settings para validación estricta al arranque.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List


# Universo fijo de instrumentos (pares mayores de OANDA vía Finnhub)
MAJOR_PAIRS: List[str] = [
    "OANDA:EUR_USD", "OANDA:GBP_USD", "OANDA:USD_JPY", "OANDA:USD_CHF",
    "OANDA:USD_CAD", "OANDA:AUD_USD", "OANDA:NZD_USD", "OANDA:EUR_GBP",
    "OANDA:EUR_JPY", "OANDA:GBP_JPY", "OANDA:CHF_JPY", "OANDA:EUR_CHF",
    "OANDA:EUR_CAD", "OANDA:AUD_JPY", "OANDA:GBP_CHF", "OANDA:EUR_AUD",
    "OANDA:EUR_NZD", "OANDA:GBP_AUD", "OANDA:AUD_CAD", "OANDA:AUD_NZD",
]


class Settings(BaseSettings):
    # ─── Finnhub WebSocket ──────────────────────────────────────────────
    finnhub_ws_url: str = Field(
        default="wss://ws.finnhub.io",
        description="WebSocket endpoint de Finnhub",
    )
    finnhub_token: str = Field(
        default="", description="Token estático de acceso (query param ?token=)"
    )

    # Instrumentos a suscribir (Finnhub symbol IDs)
    forex_symbols: List[str] = Field(
        default_factory=lambda: list(MAJOR_PAIRS),
        description="Pares de divisas suscritos al abrir el canal",
    )

    # ─── Reconexión ─────────────────────────────────────────────────────
    ws_reconnect_delay: float = Field(
        default=5.0, description="Delay fijo (seg) antes de reintentar la conexión"
    )
    subscription_queue_size: int = Field(
        default=1_000,
        description="Tamaño máximo de la cola de lotes de una FeedSubscription",
    )
    autostart_feed: bool = Field(
        default=True, description="Conectar al feed automáticamente al arrancar"
    )

    # ─── Persistencia de holdings ───────────────────────────────────────
    portfolio_storage_key: str = Field(
        default="forex_portfolio",
        description="Clave fija bajo la que se guarda la lista de holdings",
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///fxtracker.db",
        description="URL SQLAlchemy (async) del key-value store local",
    )
    db_echo: bool = Field(default=False, description="Loguear queries SQL (debug)")

    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8888)
    debug: bool = Field(default=False)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def feed_url(self) -> str:
        """URL completa del stream con el token como query param."""
        return f"{self.finnhub_ws_url}?token={self.finnhub_token}"

