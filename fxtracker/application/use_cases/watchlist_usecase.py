"""
Watchlist Use Case.

Vista de precios y selección de pares que el usuario sigue.
"""

from __future__ import annotations

from typing import List

from fxtracker.application.state.tracker_context import TrackerContext
from fxtracker.domain.value_objects.tick import PriceRecord


class WatchlistUseCase:
    """
    Caso de uso: listar precios y gestionar la selección de pares.

    Las listas se ordenan por timestamp descendente (más reciente primero).
    """

    def __init__(self, context: TrackerContext):
        self._context = context

    def trade_list(self) -> List[PriceRecord]:
        return sorted(
            self._context.prices.values(),
            key=lambda r: r.timestamp_ms,
            reverse=True,
        )

    def selected_trade_list(self) -> List[PriceRecord]:
        """Registros de los pares seleccionados que ya tienen precio."""
        records = [
            self._context.prices[symbol]
            for symbol in self._context.selected_pairs
            if symbol in self._context.prices
        ]
        return sorted(records, key=lambda r: r.timestamp_ms, reverse=True)

    def toggle_pair(self, symbol: str) -> bool:
        """
        Alterna la selección de un par.

        Returns: True si quedó seleccionado, False si se deseleccionó.
        """
        selected = self._context.selected_pairs
        if symbol in selected:
            selected.remove(symbol)
            return False
        selected.append(symbol)
        return True

    def select_all_pairs(self) -> List[str]:
        """Seleccionar todos los símbolos que tienen precio."""
        self._context.selected_pairs[:] = list(self._context.prices.keys())
        return list(self._context.selected_pairs)

    def clear_selection(self) -> None:
        self._context.selected_pairs.clear()

    def clear_trades(self) -> int:
        """Vaciar la tabla de precios. Devuelve cuántos registros había."""
        count = len(self._context.prices)
        self._context.clear_trades()
        return count
