"""Pytest fixtures para los tests de FXTracker"""

from datetime import datetime, timezone

import pytest

from fxtracker.application.state.tracker_context import TrackerContext
from fxtracker.domain.entities.holding import Holding
from fxtracker.domain.services.portfolio_valuator import PortfolioValuator
from fxtracker.domain.services.trade_reconciler import TradeReconciler
from fxtracker.domain.value_objects.tick import PriceRecord, Tick
from fxtracker.shared.config.settings import Settings

from tests.fakes import EUR_USD, GBP_USD


@pytest.fixture
def settings() -> Settings:
    """Settings de test: dos pares, reconexión rápida y BD en memoria"""
    return Settings(
        finnhub_ws_url="wss://feed.test",
        finnhub_token="test-token",
        forex_symbols=[EUR_USD, GBP_USD],
        ws_reconnect_delay=0.01,
        subscription_queue_size=10,
        autostart_feed=False,
        database_url="sqlite+aiosqlite:///:memory:",
    )


@pytest.fixture
def context() -> TrackerContext:
    return TrackerContext()


@pytest.fixture
def reconciler() -> TradeReconciler:
    return TradeReconciler()


@pytest.fixture
def valuator() -> PortfolioValuator:
    return PortfolioValuator()


@pytest.fixture
def price_table():
    """Tabla de precios con EUR/USD a 1.1050"""
    tick = Tick(symbol=EUR_USD, price=1.1050, timestamp_ms=1_700_000_000_000)
    return {EUR_USD: PriceRecord(tick=tick)}


@pytest.fixture
def sample_holding() -> Holding:
    """Holding de 1000 EUR/USD a 1.1000"""
    return Holding(
        symbol=EUR_USD,
        average_purchase_price=1.1000,
        volume=1000,
        purchase_date=datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc),
        id="h1",
    )
