"""
FXTracker – Main Application Entry Point
=========================================
Orquesta todos los componentes: Feed Finnhub + Reconciler + Cartera + API.

ARQUITECTURA DE ARRANQUE:
  1. Configurar logging
  2. Crear el Container (contexto, feed, servicios, repositorio)
  3. FastAPI startup:
     a. Inicializar base de datos y cargar la cartera guardada
     b. Iniciar ConnectionSupervisor (conexión WS a Finnhub)
  4. FastAPI shutdown:
     a. Detener supervisor (unsubscribe + close, sin reconexión)
     b. Cerrar base de datos

FLUJO DE DATOS:
  Finnhub WS → FinnhubFeedConnection → ConnectionSupervisor (flag de vida)
       → TradeReconciler → TrackerContext.prices
       → PortfolioValuator → /api/portfolio, /api/portfolio/export
  uvicorn fxtracker.main:app --host 0.0.0.0 --port 8888
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fxtracker import __version__
from fxtracker.container import Container, init_container
from fxtracker.domain.exceptions.domain_errors import DomainError
from fxtracker.presentation.api.routes import domain_error_handler, init_routes, router
from fxtracker.shared.logging.logger import get_logger, setup_logging

# ─── Logging ────────────────────────────────────────────────────────────
setup_logging()
logger = get_logger("main")


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Construye la app FastAPI sobre un contenedor (nuevo si no se pasa)."""
    container = container or init_container()
    settings = container.settings
    setup_logging(debug=settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle de la aplicación."""
        logger.info("=" * 60)
        logger.info("  FXTracker v%s", __version__)
        logger.info("  Instrumentos: %d pares", len(settings.forex_symbols))
        logger.info("  Reconexión: delay fijo %.1fs", settings.ws_reconnect_delay)
        logger.info("=" * 60)

        await container.db_manager.initialize()
        await container.portfolio.load()

        if settings.autostart_feed:
            await container.supervisor.start()
            if container.context.connection.last_error:
                logger.warning(
                    "Feed no disponible al arrancar: %s",
                    container.context.connection.last_error,
                )

        logger.info("✓ Todos los componentes iniciados correctamente")

        yield  # ← La app está corriendo aquí

        # ── SHUTDOWN ──
        logger.info("Iniciando shutdown...")
        await container.supervisor.stop()
        await container.db_manager.close()
        logger.info("✓ Shutdown completo")

    init_routes(container)

    app = FastAPI(
        title="FXTracker",
        description="Seguimiento de pares forex en tiempo real y valoración de cartera",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS para frontend local
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # En producción: restringir a dominios específicos
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainError, domain_error_handler)
    app.include_router(router)
    return app


app = create_app()
