"""
FXTracker – Logging configuration
==================================
Un único handler a stdout bajo el namespace `fxtracker.`.

    2026-10-19 10:00:00 | INFO     | fxtracker.finnhub_adapter      | ✓ Conectado

NIVELES:
  - ciclo de vida del feed (conectar, cierre, reconexión) → INFO / WARNING
  - mensajes descartados, lotes tardíos                   → DEBUG
  - errores inesperados                                    → ERROR + traceback
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_NAMESPACE = "fxtracker"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "fxtracker-stdout"

# Librerías que a INFO inundan la consola
_NOISY_LOGGERS = ("websockets", "uvicorn.access", "sqlalchemy.engine", "aiosqlite")


def setup_logging(level: Optional[int] = None, debug: bool = False) -> None:
    """
    Configura el logger del paquete. Se puede llamar varias veces
    (p.ej. import de main + lifespan): el handler se instala una sola vez
    y solo se actualiza el nivel.
    """
    if level is None:
        level = logging.DEBUG if debug else logging.INFO

    package_logger = logging.getLogger(ROOT_NAMESPACE)
    if not any(h.get_name() == _HANDLER_NAME for h in package_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        package_logger.addHandler(handler)
        package_logger.propagate = False
    package_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger hijo: get_logger("finnhub_adapter") → fxtracker.finnhub_adapter"""
    return logging.getLogger(f"{ROOT_NAMESPACE}.{name}")
