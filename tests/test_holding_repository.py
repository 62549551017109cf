"""Tests de persistencia de holdings (SQLite en memoria vía aiosqlite)"""

import json
from datetime import datetime, timezone

import pytest

from fxtracker.domain.entities.holding import Holding
from fxtracker.domain.exceptions.domain_errors import InvalidHoldingError
from fxtracker.infrastructure.persistence.database import DatabaseManager
from fxtracker.infrastructure.persistence.mappers.holding_mapper import HoldingMapper
from fxtracker.infrastructure.persistence.models import KeyValueModel
from fxtracker.infrastructure.persistence.repositories.holding_repository_impl import (
    HoldingRepositoryImpl,
)

from tests.fakes import EUR_USD, GBP_USD


def test_mapper_accepts_naive_dates_as_utc():
    record = {
        "id": "x1",
        "symbol": EUR_USD,
        "average_purchase_price": 1.1,
        "volume": 10,
        "purchase_date": "2026-10-01T12:00:00",
    }
    holding = HoldingMapper().to_entity(record)

    assert holding.purchase_date.tzinfo is timezone.utc
    assert holding.volume == 10.0


@pytest.mark.asyncio
async def test_load_without_saved_portfolio_returns_empty(settings):
    db = DatabaseManager(settings)
    await db.initialize()
    try:
        repo = HoldingRepositoryImpl(db, settings.portfolio_storage_key)
        assert await repo.load() == []
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_save_then_load_preserves_holdings(settings, sample_holding):
    db = DatabaseManager(settings)
    await db.initialize()
    try:
        repo = HoldingRepositoryImpl(db, settings.portfolio_storage_key)
        other = Holding(
            symbol=GBP_USD,
            average_purchase_price=1.25,
            volume=0.5,
            purchase_date=datetime(2026, 10, 2, tzinfo=timezone.utc),
            id="h2",
        )
        await repo.save([sample_holding, other])
        # segunda escritura sobre la misma clave
        await repo.save([other])

        assert await repo.load() == [other]
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_session_requires_initialize(settings):
    db = DatabaseManager(settings)
    assert not db.is_initialized

    with pytest.raises(RuntimeError):
        async with db.session():
            pass


async def _store_raw(db, key, value):
    async with db.session() as session:
        session.add(KeyValueModel(key=key, value=value))
        await session.commit()


@pytest.mark.parametrize(
    "raw",
    [
        "not-json",
        '{"id": "x"}',
        '[{"id": "x1", "symbol": "OANDA:EUR_USD"}]',
        '["garbage"]',
    ],
)
@pytest.mark.asyncio
async def test_corrupt_saved_portfolio_loads_empty(settings, raw):
    """Un valor ilegible no impide arrancar: la cartera queda vacía"""
    db = DatabaseManager(settings)
    await db.initialize()
    try:
        await _store_raw(db, settings.portfolio_storage_key, raw)
        repo = HoldingRepositoryImpl(db, settings.portfolio_storage_key)
        assert await repo.load() == []
    finally:
        await db.close()


@pytest.mark.parametrize("field_name", ["average_purchase_price", "volume"])
@pytest.mark.asyncio
async def test_saved_holding_with_non_positive_values_rejected(settings, field_name):
    """avg 0 dividiría por cero al valorar; el registro se descarta"""
    record = {
        "id": "x1",
        "symbol": EUR_USD,
        "average_purchase_price": 1.1,
        "volume": 10,
        "purchase_date": "2026-10-01T12:00:00+00:00",
    }
    record[field_name] = 0
    db = DatabaseManager(settings)
    await db.initialize()
    try:
        await _store_raw(db, settings.portfolio_storage_key, json.dumps([record]))
        repo = HoldingRepositoryImpl(db, settings.portfolio_storage_key)
        assert await repo.load() == []
    finally:
        await db.close()


@pytest.mark.parametrize("value", [0, -1.5, float("nan")])
def test_mapper_rejects_invalid_average_price(value):
    record = {
        "id": "x1",
        "symbol": EUR_USD,
        "average_purchase_price": value,
        "volume": 10,
        "purchase_date": "2026-10-01T12:00:00+00:00",
    }
    with pytest.raises(InvalidHoldingError):
        HoldingMapper().to_entity(record)
