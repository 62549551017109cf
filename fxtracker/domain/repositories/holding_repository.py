"""
FXTracker – Domain Repository Interface: Holdings
==================================================
Interfaz abstracta para persistir la lista de holdings.

El core trata el almacenamiento como un get/set opaco bajo una clave
fija: se guarda y se carga la lista COMPLETA (no hay updates parciales).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from fxtracker.domain.entities.holding import Holding


class IHoldingRepository(ABC):
    """
    Interfaz abstracta para repositorio de holdings.

    OPERACIONES ASYNC:
    Todas las operaciones son async para no bloquear el event loop.
    """

    @abstractmethod
    async def load(self) -> List[Holding]:
        """
        Carga la lista de holdings guardada.

        Returns:
            Lista de holdings (vacía si nunca se guardó nada)
        """
        pass

    @abstractmethod
    async def save(self, holdings: List[Holding]) -> None:
        """
        Reemplaza la lista guardada por `holdings`.

        Args:
            holdings: Lista completa a persistir
        """
        pass
