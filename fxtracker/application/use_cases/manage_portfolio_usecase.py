"""
Manage Portfolio Use Case.

Caso de uso para comprar, vender, valorar y persistir la cartera.
Orquesta PortfolioValuator (lógica pura) con el repositorio de holdings.

Si la escritura en el repositorio falla, la lista en memoria se
restaura a su estado anterior y el error se propaga: memoria y store
nunca quedan desalineados.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from fxtracker.application.state.tracker_context import TrackerContext
from fxtracker.domain.entities.holding import Holding, ValuatedHolding
from fxtracker.domain.repositories.holding_repository import IHoldingRepository
from fxtracker.domain.services.portfolio_valuator import PortfolioValuator
from fxtracker.shared.logging.logger import get_logger

if TYPE_CHECKING:
    from fxtracker.application.services.connection_supervisor import ConnectionSupervisor

logger = get_logger("manage_portfolio")


@dataclass
class PortfolioSnapshot:
    """Cartera valorada + total."""
    holdings: List[ValuatedHolding] = field(default_factory=list)
    total_value: float = 0.0

    def to_dict(self) -> dict:
        return {
            "holdings": [h.to_dict() for h in self.holdings],
            "total_value": self.total_value,
        }


class ManagePortfolioUseCase:
    """
    Caso de uso: gestionar la cartera del usuario.

    Cada mutación (acquire/release/reset) se persiste inmediatamente.
    Si el valuator lanza error no hay mutación ni escritura.
    """

    def __init__(
        self,
        context: TrackerContext,
        valuator: PortfolioValuator,
        repository: Optional[IHoldingRepository] = None,
        supervisor: Optional["ConnectionSupervisor"] = None,
    ):
        self._context = context
        self._valuator = valuator
        self._repository = repository
        self._supervisor = supervisor

    async def load(self) -> int:
        """Cargar holdings persistidos en el contexto."""
        if self._repository is None:
            return 0
        holdings = await self._repository.load()
        self._context.holdings[:] = holdings
        logger.info("Cartera cargada: %d holdings", len(holdings))
        return len(holdings)

    async def acquire(self, symbol: str, volume: float) -> Holding:
        before = list(self._context.holdings)
        holding = self._valuator.acquire(
            self._context.holdings, self._context.prices, symbol, volume,
        )
        await self._persist(before)
        return holding

    async def release(self, holding_id: str) -> Optional[Holding]:
        before = list(self._context.holdings)
        removed = self._valuator.release(self._context.holdings, holding_id)
        if removed is not None:
            await self._persist(before)
        return removed

    async def reset(self) -> None:
        """
        Reset completo: detiene el feed, vacía precios, holdings y
        selección, y guarda la cartera vacía.
        """
        if self._supervisor is not None:
            await self._supervisor.stop()
        before = list(self._context.holdings)
        self._context.clear_all()
        await self._persist(before)
        logger.info("Estado reiniciado (%d holdings eliminados)", len(before))

    def snapshot(self) -> PortfolioSnapshot:
        valuated = self._valuator.valuate(self._context.holdings, self._context.prices)
        return PortfolioSnapshot(
            holdings=valuated,
            total_value=sum(v.total_value for v in valuated),
        )

    async def _persist(self, before: List[Holding]) -> None:
        if self._repository is None:
            return
        try:
            await self._repository.save(list(self._context.holdings))
        except Exception:
            self._context.holdings[:] = before
            logger.error("No se pudo guardar la cartera; cambios revertidos", exc_info=True)
            raise
