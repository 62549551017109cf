"""
Dependency Injection Container.

Este módulo proporciona el contenedor de inyección de dependencias
que gestiona todas las instancias de servicios, repositorios y casos de uso.

Clean Architecture: Este contenedor vive en la capa más externa y es el único
lugar donde se crean dependencias concretas. El estado mutable vive en UN
TrackerContext que se inyecta explícitamente a cada componente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from fxtracker.application.ports.feed_connection import IFeedConnection
from fxtracker.application.services.connection_supervisor import ConnectionSupervisor
from fxtracker.application.state.tracker_context import TrackerContext
from fxtracker.application.use_cases.manage_portfolio_usecase import ManagePortfolioUseCase
from fxtracker.application.use_cases.watchlist_usecase import WatchlistUseCase
from fxtracker.domain.repositories.holding_repository import IHoldingRepository
from fxtracker.domain.services.portfolio_valuator import PortfolioValuator
from fxtracker.domain.services.trade_reconciler import TradeReconciler
from fxtracker.infrastructure.persistence.database import DatabaseManager
from fxtracker.shared.config.settings import Settings


@dataclass
class Container:
    """
    Contenedor de Inyección de Dependencias.

    Gestiona el ciclo de vida de todas las dependencias de la aplicación.
    Cada propiedad crea su instancia la primera vez y la reutiliza.
    """

    # Configuración
    settings: Settings = field(default_factory=Settings)

    # Estado
    _context: Optional[TrackerContext] = None

    # Ports / infraestructura
    _feed: Optional[IFeedConnection] = None
    _db_manager: Optional[DatabaseManager] = None
    _holding_repository: Optional[IHoldingRepository] = None

    # Domain Services (stateless, se pueden compartir)
    _reconciler: Optional[TradeReconciler] = None
    _valuator: Optional[PortfolioValuator] = None

    # Application
    _supervisor: Optional[ConnectionSupervisor] = None
    _portfolio: Optional[ManagePortfolioUseCase] = None
    _watchlist: Optional[WatchlistUseCase] = None

    # ==================== Estado ====================

    @property
    def context(self) -> TrackerContext:
        if self._context is None:
            self._context = TrackerContext()
        return self._context

    # ==================== Domain Services ====================

    @property
    def reconciler(self) -> TradeReconciler:
        if self._reconciler is None:
            self._reconciler = TradeReconciler()
        return self._reconciler

    @property
    def valuator(self) -> PortfolioValuator:
        if self._valuator is None:
            self._valuator = PortfolioValuator()
        return self._valuator

    # ==================== Infraestructura ====================

    @property
    def feed(self) -> IFeedConnection:
        """Obtiene la conexión al feed de mercado."""
        if self._feed is None:
            # Import aquí para no cargar websockets en tests que no lo usan
            from fxtracker.infrastructure.external.finnhub_adapter import FinnhubFeedConnection
            self._feed = FinnhubFeedConnection(self.settings)
        return self._feed

    @property
    def db_manager(self) -> DatabaseManager:
        if self._db_manager is None:
            self._db_manager = DatabaseManager(self.settings)
        return self._db_manager

    @property
    def holding_repository(self) -> IHoldingRepository:
        if self._holding_repository is None:
            from fxtracker.infrastructure.persistence.repositories.holding_repository_impl import (
                HoldingRepositoryImpl,
            )
            self._holding_repository = HoldingRepositoryImpl(
                self.db_manager, self.settings.portfolio_storage_key,
            )
        return self._holding_repository

    # ==================== Application ====================

    @property
    def supervisor(self) -> ConnectionSupervisor:
        if self._supervisor is None:
            self._supervisor = ConnectionSupervisor(self.feed, self.reconciler, self.context)
        return self._supervisor

    @property
    def portfolio(self) -> ManagePortfolioUseCase:
        if self._portfolio is None:
            self._portfolio = ManagePortfolioUseCase(
                self.context, self.valuator, self.holding_repository, self.supervisor,
            )
        return self._portfolio

    @property
    def watchlist(self) -> WatchlistUseCase:
        if self._watchlist is None:
            self._watchlist = WatchlistUseCase(self.context)
        return self._watchlist

    # ==================== Lifecycle ====================

    def reset(self) -> None:
        """Resetea todas las instancias (útil para tests)."""
        self._context = None
        self._feed = None
        self._db_manager = None
        self._holding_repository = None
        self._reconciler = None
        self._valuator = None
        self._supervisor = None
        self._portfolio = None
        self._watchlist = None

    def override(self, name: str, instance: Any) -> None:
        """
        Override una dependencia (útil para tests con fakes).

        Args:
            name: Nombre de la dependencia (ej: 'feed')
            instance: Instancia a usar
        """
        attr_name = f"_{name}"
        if hasattr(self, attr_name):
            setattr(self, attr_name, instance)
        else:
            raise ValueError(f"Unknown dependency: {name}")


# ==================== Global Container ====================

_container: Optional[Container] = None


def get_container() -> Container:
    """Obtiene la instancia global del contenedor (la crea si no existe)."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def init_container(settings: Optional[Settings] = None) -> Container:
    """
    Inicializa el contenedor con configuración específica.

    Args:
        settings: Configuración opcional. Si es None, usa valores por defecto.
    """
    global _container
    _container = Container(settings=settings or Settings())
    return _container


def reset_container() -> None:
    global _container
    if _container is not None:
        _container.reset()
    _container = None
