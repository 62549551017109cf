"""
FXTracker – API Routes (FastAPI)
=================================
Endpoints REST para el frontend / clientes externos.

Endpoints disponibles:
  GET    /api/health                 → health check
  GET    /api/status                 → estado completo del sistema
  GET    /api/prices                 → últimos precios (más reciente primero)
  GET    /api/prices/selected        → últimos precios de los pares seleccionados
  POST   /api/pairs/{symbol}/toggle  → alternar selección de un par
  POST   /api/pairs/select-all       → seleccionar todos los pares con precio
  DELETE /api/prices                 → vaciar la tabla de precios
  DELETE /api/pairs                  → limpiar selección
  GET    /api/portfolio              → cartera valorada + total
  POST   /api/portfolio              → comprar volumen al último precio
  DELETE /api/portfolio/{holding_id} → eliminar holding
  GET    /api/portfolio/export       → cartera en CSV (descarga)
  GET    /api/connection             → estado de conexión al feed
  POST   /api/connection/start       → conectar feed
  POST   /api/connection/stop        → desconectar feed
  POST   /api/connection/check       → sincronizar estado con el canal real
  DELETE /api/state                  → reset completo (feed, precios, cartera, selección)
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from fxtracker.domain.entities.holding import ValuatedHolding
from fxtracker.domain.exceptions.domain_errors import DomainError
from fxtracker.domain.services.instruments import format_symbol
from fxtracker.domain.value_objects.tick import PriceRecord
from fxtracker.infrastructure.export.csv_exporter import export_filename, export_portfolio_csv
from fxtracker.presentation.api.schemas import (
    AcquireRequest,
    ConnectionStatusSchema,
    HealthResponse,
    HoldingSchema,
    PairSelectionResponse,
    PortfolioResponse,
    PriceRecordSchema,
)
from fxtracker.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()

# Contenedor inyectado desde main.py
_container = None

# Código de error de dominio → status HTTP
ERROR_STATUS = {
    "PRICE_UNAVAILABLE": 409,
    "INVALID_HOLDING": 422,
}


def init_routes(container) -> None:
    """Inyectar dependencias desde main.py al arrancar."""
    global _container
    _container = container


def _require_container():
    if _container is None:
        raise HTTPException(status_code=503, detail="Server not ready")
    return _container


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Mapea DomainError a una respuesta JSON con status 4xx."""
    status = ERROR_STATUS.get(exc.code, 400)
    logger.info("Error de dominio en %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _price_schema(record: PriceRecord) -> PriceRecordSchema:
    data = record.to_dict()
    return PriceRecordSchema(display_symbol=format_symbol(record.symbol), **data)


def _holding_schema(item: ValuatedHolding) -> HoldingSchema:
    data = item.to_dict()
    return HoldingSchema(display_symbol=format_symbol(item.holding.symbol), **data)


# ─── Estado ────────────────────────────────────────────────────────────

@router.get("/api/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check para monitoreo."""
    return HealthResponse(status="ok", service="fxtracker")


@router.get("/api/status")
async def system_status() -> dict:
    """Estado completo: conexión, feed, precios y cartera."""
    c = _require_container()
    feed_stats = getattr(c.feed, "stats", {})
    return {
        "connection": c.context.connection.to_dict(),
        "feed": feed_stats,
        "prices": len(c.context.prices),
        "holdings": len(c.context.holdings),
        "selected_pairs": len(c.context.selected_pairs),
        "late_batches_dropped": c.supervisor.late_batches_dropped,
    }


# ─── Precios y selección ──────────────────────────────────────────────

@router.get("/api/prices", response_model=list[PriceRecordSchema])
async def get_prices() -> list[PriceRecordSchema]:
    c = _require_container()
    return [_price_schema(r) for r in c.watchlist.trade_list()]


@router.get("/api/prices/selected", response_model=list[PriceRecordSchema])
async def get_selected_prices() -> list[PriceRecordSchema]:
    c = _require_container()
    return [_price_schema(r) for r in c.watchlist.selected_trade_list()]


@router.delete("/api/prices")
async def clear_prices() -> dict:
    """Vaciar la tabla de precios (la cartera se valora a coste hasta el próximo tick)."""
    c = _require_container()
    return {"cleared": c.watchlist.clear_trades()}


@router.post("/api/pairs/{symbol}/toggle")
async def toggle_pair(symbol: str) -> dict:
    c = _require_container()
    selected = c.watchlist.toggle_pair(symbol)
    return {"symbol": symbol, "selected": selected}


@router.post("/api/pairs/select-all", response_model=PairSelectionResponse)
async def select_all_pairs() -> PairSelectionResponse:
    c = _require_container()
    return PairSelectionResponse(selected_pairs=c.watchlist.select_all_pairs())


@router.delete("/api/pairs", response_model=PairSelectionResponse)
async def clear_selection() -> PairSelectionResponse:
    c = _require_container()
    c.watchlist.clear_selection()
    return PairSelectionResponse(selected_pairs=[])


# ─── Cartera ──────────────────────────────────────────────────────────

@router.get("/api/portfolio", response_model=PortfolioResponse)
async def get_portfolio() -> PortfolioResponse:
    c = _require_container()
    snapshot = c.portfolio.snapshot()
    return PortfolioResponse(
        holdings=[_holding_schema(v) for v in snapshot.holdings],
        total_value=snapshot.total_value,
    )


@router.post("/api/portfolio", response_model=HoldingSchema, status_code=201)
async def acquire(body: AcquireRequest) -> HoldingSchema:
    """Comprar volumen al último precio (merge si ya hay holding)."""
    c = _require_container()
    holding = await c.portfolio.acquire(body.symbol, body.volume)
    valuated = c.valuator.valuate_holding(holding, c.context.prices)
    return _holding_schema(valuated)


@router.delete("/api/portfolio/{holding_id}")
async def release(holding_id: str) -> dict:
    c = _require_container()
    removed = await c.portfolio.release(holding_id)
    return {"id": holding_id, "removed": removed is not None}


@router.get("/api/portfolio/export")
async def export_portfolio() -> Response:
    """Cartera valorada como CSV descargable."""
    c = _require_container()
    snapshot = c.portfolio.snapshot()
    content = export_portfolio_csv(snapshot.holdings)
    filename = export_filename(datetime.now(timezone.utc).date())
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ─── Conexión ─────────────────────────────────────────────────────────

@router.get("/api/connection", response_model=ConnectionStatusSchema)
async def connection_status() -> ConnectionStatusSchema:
    c = _require_container()
    return ConnectionStatusSchema(**c.context.connection.to_dict())


@router.post("/api/connection/start", response_model=ConnectionStatusSchema)
async def connection_start() -> ConnectionStatusSchema:
    c = _require_container()
    await c.supervisor.start()
    return ConnectionStatusSchema(**c.context.connection.to_dict())


@router.post("/api/connection/stop", response_model=ConnectionStatusSchema)
async def connection_stop() -> ConnectionStatusSchema:
    c = _require_container()
    await c.supervisor.stop()
    return ConnectionStatusSchema(**c.context.connection.to_dict())


@router.post("/api/connection/check", response_model=ConnectionStatusSchema)
async def connection_check() -> ConnectionStatusSchema:
    c = _require_container()
    c.supervisor.check_connection()
    return ConnectionStatusSchema(**c.context.connection.to_dict())


# ─── Reset ────────────────────────────────────────────────────────────

@router.delete("/api/state", response_model=ConnectionStatusSchema)
async def reset_state() -> ConnectionStatusSchema:
    """Reset completo: desconecta el feed y guarda la cartera vacía."""
    c = _require_container()
    await c.portfolio.reset()
    return ConnectionStatusSchema(**c.context.connection.to_dict())
