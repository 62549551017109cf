"""Tests del export CSV de la cartera y del formato de símbolos"""

from datetime import date, datetime, timezone

import pytest

from fxtracker.domain.entities.holding import Holding
from fxtracker.domain.services.instruments import format_symbol
from fxtracker.infrastructure.export.csv_exporter import (
    CSV_HEADERS,
    export_filename,
    export_portfolio_csv,
    format_row,
)


@pytest.mark.parametrize(
    "symbol, expected",
    [
        ("OANDA:EUR_USD", "EUR/USD"),
        ("OANDA:GBP_JPY", "GBP/JPY"),
        ("EUR_USD", "EUR/USD"),
        ("BINANCE:BTCUSDT", "BTCUSDT"),
    ],
)
def test_format_symbol(symbol, expected):
    assert format_symbol(symbol) == expected


def test_row_formats_prices_totals_and_percent(valuator, sample_holding, price_table):
    row = format_row(valuator.valuate_holding(sample_holding, price_table))

    assert row == [
        "EUR/USD",
        "1.10000",
        "1.10500",
        "1000",
        "1105.00",
        "5.00",
        "0.455%",
        "2026-10-01",
    ]


def test_fractional_volume_kept(valuator):
    holding = Holding(
        symbol="OANDA:GBP_USD",
        average_purchase_price=1.25,
        volume=0.5,
        purchase_date=datetime(2026, 1, 2, tzinfo=timezone.utc),
    )
    row = format_row(valuator.valuate_holding(holding, {}))
    assert row[3] == "0.5"
    assert row[6] == "0.000%"


def test_export_has_header_and_one_row_per_holding(valuator, sample_holding, price_table):
    text = export_portfolio_csv(valuator.valuate([sample_holding], price_table))
    lines = text.split("\n")

    assert lines[0] == ",".join(CSV_HEADERS)
    assert lines[1] == "EUR/USD,1.10000,1.10500,1000,1105.00,5.00,0.455%,2026-10-01"
    assert len(lines) == 2


def test_export_empty_portfolio_is_header_only():
    assert export_portfolio_csv([]) == ",".join(CSV_HEADERS)


def test_export_filename_uses_date():
    assert export_filename(date(2026, 10, 19)) == "forex_portfolio_2026-10-19.csv"
