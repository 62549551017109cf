"""
FXTracker – Domain Service: Instrument formatting
==================================================
Utilidades puras sobre identificadores de instrumento.

    "OANDA:EUR_USD" → "EUR/USD"
"""

from __future__ import annotations


def format_symbol(symbol: str) -> str:
    """Quita el prefijo de venue y reemplaza el delimitador del par."""
    _, _, pair = symbol.rpartition(":")
    return pair.replace("_", "/", 1)
