"""
FXTracker – API Schemas (Pydantic)
===================================
Schemas de validación para request/response de la API REST.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import List, Optional


class HealthResponse(BaseModel):
    status: str
    service: str


class AcquireRequest(BaseModel):
    """Body para comprar volumen de un par al último precio."""
    symbol: str = Field(min_length=1)
    volume: float = Field(gt=0)


class PriceRecordSchema(BaseModel):
    symbol: str
    display_symbol: str
    price: float
    timestamp_ms: int
    volume: float
    conditions: Optional[List[str]] = None
    change_percent: Optional[float] = None
    direction: str


class ConnectionStatusSchema(BaseModel):
    state: str
    connecting: bool
    connected: bool
    last_error: Optional[str] = None


class HoldingSchema(BaseModel):
    id: str
    symbol: str
    display_symbol: str
    average_purchase_price: float
    volume: float
    purchase_date: str
    current_price: float
    total_value: float
    profit_loss: float
    profit_loss_percent: float


class PortfolioResponse(BaseModel):
    holdings: List[HoldingSchema]
    total_value: float


class PairSelectionResponse(BaseModel):
    selected_pairs: List[str]
