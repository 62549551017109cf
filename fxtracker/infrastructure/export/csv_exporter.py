"""
FXTracker – Portfolio CSV Export
=================================
Convierte la cartera valorada a texto CSV. La entrega como descarga
(headers HTTP, fichero) la hace la capa de presentación.

FORMATO:
    Pair,Purchase Price,Current Price,Volume,Total Value,Profit/Loss,Profit/Loss %,Purchase Date
    EUR/USD,1.10000,1.10500,1000,1105.00,5.00,0.455%,2026-10-19

  - precios con 5 decimales
  - totales y P/L con 2 decimales
  - porcentaje con 3 decimales + "%"
  - fecha de compra en ISO (YYYY-MM-DD)
"""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable, List

from fxtracker.domain.entities.holding import ValuatedHolding
from fxtracker.domain.services.instruments import format_symbol

CSV_HEADERS: List[str] = [
    "Pair",
    "Purchase Price",
    "Current Price",
    "Volume",
    "Total Value",
    "Profit/Loss",
    "Profit/Loss %",
    "Purchase Date",
]


def _format_volume(volume: float) -> str:
    # 1000.0 → "1000", 0.5 → "0.5"
    if float(volume).is_integer():
        return str(int(volume))
    return repr(float(volume))


def format_row(item: ValuatedHolding) -> List[str]:
    """Una fila CSV con los valores calculados de un holding."""
    h = item.holding
    return [
        format_symbol(h.symbol),
        f"{h.average_purchase_price:.5f}",
        f"{item.current_price:.5f}",
        _format_volume(h.volume),
        f"{item.total_value:.2f}",
        f"{item.profit_loss:.2f}",
        f"{item.profit_loss_percent:.3f}%",
        h.purchase_date.date().isoformat(),
    ]


def export_portfolio_csv(valuated: Iterable[ValuatedHolding]) -> str:
    """Texto CSV completo (header + una fila por holding)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for item in valuated:
        writer.writerow(format_row(item))
    return buffer.getvalue().rstrip("\n")


def export_filename(day: date) -> str:
    return f"forex_portfolio_{day.isoformat()}.csv"
