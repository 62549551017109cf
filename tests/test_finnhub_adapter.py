"""Tests del adaptador WebSocket de Finnhub (transporte falso, sin red)"""

import asyncio
import json

import pytest

from fxtracker.application.ports.feed_connection import FeedConnectionError
from fxtracker.domain.value_objects.connection_state import ConnectionState
from fxtracker.infrastructure.external.finnhub_adapter import (
    FeedSubscription,
    FinnhubFeedConnection,
)

from tests.fakes import EUR_USD, GBP_USD, FakeConnect, settle, trade_message, wire_tick


def _feed(settings, failures=0):
    connect = FakeConnect(failures=failures)
    return FinnhubFeedConnection(settings, connect_fn=connect), connect


@pytest.mark.asyncio
async def test_connect_opens_with_token_and_subscribes_each_symbol(settings):
    """Un subscribe por instrumento, en orden, tras abrir el canal"""
    feed, connect = _feed(settings)
    await feed.connect(lambda ticks: None)

    assert connect.urls == ["wss://feed.test?token=test-token"]
    assert feed.state is ConnectionState.CONNECTED
    assert feed.is_connected()
    assert [json.loads(m) for m in connect.last.sent] == [
        {"type": "subscribe", "symbol": EUR_USD},
        {"type": "subscribe", "symbol": GBP_USD},
    ]
    await feed.disconnect()


@pytest.mark.asyncio
async def test_connect_is_noop_while_connected(settings):
    feed, connect = _feed(settings)
    await asyncio.gather(feed.connect(lambda t: None), feed.connect(lambda t: None))
    await feed.connect(lambda t: None)

    assert len(connect.urls) == 1
    await feed.disconnect()


@pytest.mark.asyncio
async def test_trade_batches_delivered_to_handler(settings):
    feed, connect = _feed(settings)
    batches = []
    await feed.connect(batches.append)

    connect.last.push(trade_message(wire_tick(price=1.1, t=1), wire_tick(GBP_USD, 1.25, 2)))
    await settle()

    assert len(batches) == 1
    assert [t.symbol for t in batches[0]] == [EUR_USD, GBP_USD]
    await feed.disconnect()


@pytest.mark.asyncio
async def test_async_handler_is_awaited(settings):
    feed, connect = _feed(settings)
    received = []

    async def handler(ticks):
        received.extend(ticks)

    await feed.connect(handler)
    connect.last.push(trade_message(wire_tick()))
    await settle()

    assert len(received) == 1
    await feed.disconnect()


@pytest.mark.asyncio
async def test_malformed_messages_are_dropped_silently(settings):
    """Mensajes inválidos no llegan al consumidor y el canal sigue abierto"""
    feed, connect = _feed(settings)
    batches = []
    await feed.connect(batches.append)

    ws = connect.last
    ws.push("not json")
    ws.push(json.dumps({"type": "trade", "data": [{"s": EUR_USD}]}))
    ws.push(json.dumps({"type": "ping"}))
    ws.push(trade_message(wire_tick(price=1.2)))
    await settle()

    assert len(batches) == 1
    assert batches[0][0].price == 1.2
    assert feed.is_connected()
    assert feed.stats["messages_dropped"] == 2
    assert feed.stats["messages_received"] == 4
    await feed.disconnect()


@pytest.mark.asyncio
async def test_handler_error_does_not_stop_listener(settings):
    feed, connect = _feed(settings)
    calls = []

    def handler(ticks):
        calls.append(ticks)
        raise RuntimeError("boom")

    await feed.connect(handler)
    connect.last.push(trade_message(wire_tick()))
    connect.last.push(trade_message(wire_tick()))
    await settle()

    assert len(calls) == 2
    assert feed.is_connected()
    await feed.disconnect()


@pytest.mark.asyncio
async def test_disconnect_unsubscribes_and_never_reconnects(settings):
    feed, connect = _feed(settings)
    await feed.connect(lambda t: None)
    ws = connect.last

    await feed.disconnect()
    await asyncio.sleep(settings.ws_reconnect_delay * 5)

    unsubscribes = [json.loads(m) for m in ws.sent[2:]]
    assert unsubscribes == [
        {"type": "unsubscribe", "symbol": EUR_USD},
        {"type": "unsubscribe", "symbol": GBP_USD},
    ]
    assert ws.close_calls == 1
    assert feed.state is ConnectionState.DISCONNECTED
    assert not feed.is_connected()
    assert len(connect.urls) == 1


@pytest.mark.asyncio
async def test_disconnect_without_connection_is_safe(settings):
    feed, connect = _feed(settings)
    await feed.disconnect()

    assert feed.state is ConnectionState.DISCONNECTED
    assert connect.urls == []


@pytest.mark.asyncio
async def test_server_close_schedules_single_reconnect(settings):
    """Un cierre no intencional (incluso code 1000) reabre tras el delay"""
    feed, connect = _feed(settings)
    await feed.connect(lambda t: None)

    connect.last.server_close(1000, "bye")
    await settle()
    assert feed.state is ConnectionState.RECONNECTING
    assert feed.reconnect_pending
    assert not feed.is_connected()

    await asyncio.sleep(settings.ws_reconnect_delay * 5)

    assert len(connect.urls) == 2
    assert feed.state is ConnectionState.CONNECTED
    assert not feed.reconnect_pending
    assert len(connect.last.sent) == 2  # re-suscripción completa
    await feed.disconnect()


@pytest.mark.asyncio
async def test_disconnect_cancels_pending_reconnect(settings):
    feed, connect = _feed(settings)
    await feed.connect(lambda t: None)

    connect.last.server_close(1006)
    await settle()
    assert feed.reconnect_pending

    await feed.disconnect()
    await asyncio.sleep(settings.ws_reconnect_delay * 5)

    assert not feed.reconnect_pending
    assert len(connect.urls) == 1
    assert feed.state is ConnectionState.DISCONNECTED


@pytest.mark.asyncio
async def test_failed_open_raises_and_retries(settings):
    """Un open fallido cuenta como cierre: error + reintento agendado"""
    feed, connect = _feed(settings, failures=1)

    with pytest.raises(FeedConnectionError) as exc:
        await feed.connect(lambda t: None)

    assert "connection refused" in str(exc.value)
    assert feed.last_error == "connection refused"
    assert feed.state is ConnectionState.RECONNECTING

    await asyncio.sleep(settings.ws_reconnect_delay * 5)

    assert len(connect.urls) == 2
    assert feed.state is ConnectionState.CONNECTED
    await feed.disconnect()


@pytest.mark.asyncio
async def test_manual_connect_while_reconnecting_cancels_timer(settings):
    feed, connect = _feed(settings, failures=1)
    with pytest.raises(FeedConnectionError):
        await feed.connect(lambda t: None)

    await feed.connect(lambda t: None)
    assert not feed.reconnect_pending

    await asyncio.sleep(settings.ws_reconnect_delay * 5)
    assert len(connect.urls) == 2
    await feed.disconnect()


@pytest.mark.asyncio
async def test_subscription_yields_batches_until_unsubscribe(settings):
    feed, connect = _feed(settings)
    subscription = await feed.subscribe()

    connect.last.push(trade_message(wire_tick(price=1.3)))
    batch = await asyncio.wait_for(subscription.__anext__(), timeout=1)
    assert batch[0].price == 1.3

    await subscription.unsubscribe()

    assert subscription.closed
    assert feed.state is ConnectionState.DISCONNECTED
    remaining = [b async for b in subscription]
    assert remaining == []


@pytest.mark.asyncio
async def test_only_one_subscriber_allowed(settings):
    feed, _ = _feed(settings)
    subscription = await feed.subscribe()

    with pytest.raises(RuntimeError):
        await feed.subscribe()

    await subscription.unsubscribe()


@pytest.mark.asyncio
async def test_subscription_queue_drops_oldest(settings):
    feed, _ = _feed(settings)
    subscription = FeedSubscription(feed, max_queue_size=2)

    subscription.push(["a"])
    subscription.push(["b"])
    subscription.push(["c"])

    assert subscription.dropped == 1
    assert await subscription.__anext__() == ["b"]
    assert await subscription.__anext__() == ["c"]
