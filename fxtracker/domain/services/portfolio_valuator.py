"""
FXTracker – Domain Service: Portfolio Valuator
===============================================
Valoración de la cartera y contabilidad de coste medio ponderado.

VALORACIÓN (por holding):

    current  = último precio del símbolo, o avg si nunca se observó
    total    = current × volume
    P/L      = total - avg × volume
    P/L %    = (current - avg) / avg × 100      (redondeado a 3 dec.)

    Ejemplo: avg=1.1000, vol=1000, current=1.1050
             total=1105.0, P/L=5.0, P/L%=0.455

    Un símbolo nunca observado se valora a coste → P/L = 0.

COSTE MEDIO PONDERADO (acquire sobre holding existente):

    new_vol = old_vol + added
    new_avg = (old_avg × old_vol + price × added) / new_vol

    Ejemplo: (1.10, 1000) + 1000 @ 1.20 → (1.15, 2000)

PROTECCIÓN:
  - acquire sin precio observado → ValuationError, sin mutación parcial.
  - volumen <= 0 → InvalidHoldingError (volume > 0 siempre).
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional

from fxtracker.domain.entities.holding import Holding, ValuatedHolding
from fxtracker.domain.exceptions.domain_errors import (
    InvalidHoldingError,
    ValuationError,
)
from fxtracker.domain.value_objects.tick import PriceRecord
from fxtracker.shared.logging.logger import get_logger

logger = get_logger("portfolio_valuator")

PERCENT_DECIMALS = 3


class PortfolioValuator:
    """
    Calculadora de valoración de cartera.

    NO guarda estado: opera sobre la lista de holdings y la tabla de
    precios que le pasa el caller (ambas viven en el TrackerContext).
    """

    # ════════════════════════════════════════════════════════════════
    #  VALORACIÓN
    # ════════════════════════════════════════════════════════════════

    def valuate_holding(
        self, holding: Holding, price_table: Mapping[str, PriceRecord],
    ) -> ValuatedHolding:
        record = price_table.get(holding.symbol)
        avg = holding.average_purchase_price
        current = record.price if record is not None else avg
        total_value = current * holding.volume
        profit_loss = total_value - holding.cost_basis()
        profit_loss_percent = round((current - avg) / avg * 100.0, PERCENT_DECIMALS)
        return ValuatedHolding(
            holding=holding,
            current_price=current,
            total_value=total_value,
            profit_loss=profit_loss,
            profit_loss_percent=profit_loss_percent + 0.0,
        )

    def valuate(
        self,
        holdings: Iterable[Holding],
        price_table: Mapping[str, PriceRecord],
    ) -> List[ValuatedHolding]:
        """Valorar todos los holdings contra la tabla de precios."""
        return [self.valuate_holding(h, price_table) for h in holdings]

    def total_value(
        self,
        holdings: Iterable[Holding],
        price_table: Mapping[str, PriceRecord],
    ) -> float:
        """Valor total de la cartera: Σ current × volume."""
        return sum(v.total_value for v in self.valuate(holdings, price_table))

    # ════════════════════════════════════════════════════════════════
    #  ESCRITURA
    # ════════════════════════════════════════════════════════════════

    def acquire(
        self,
        holdings: List[Holding],
        price_table: Mapping[str, PriceRecord],
        symbol: str,
        added_volume: float,
        now: Optional[datetime] = None,
    ) -> Holding:
        """
        Comprar `added_volume` de `symbol` al último precio observado.

        Si ya existe un holding del símbolo se hace merge (media
        ponderada) en la MISMA posición de la lista; si no, se añade uno
        nuevo con purchase_date = now.

        Raises:
            InvalidHoldingError: added_volume <= 0
            ValuationError: no hay PriceRecord para el símbolo
        """
        if not added_volume > 0:
            raise InvalidHoldingError(
                f"El volumen debe ser positivo, recibido {added_volume}"
            )

        record = price_table.get(symbol)
        if record is None:
            raise ValuationError(
                f"Price unavailable for {symbol}", symbol=symbol,
            )
        price = record.price

        index = _index_of_symbol(holdings, symbol)
        if index is not None:
            existing = holdings[index]
            new_volume = existing.volume + added_volume
            new_avg = (existing.cost_basis() + price * added_volume) / new_volume
            merged = replace(
                existing, volume=new_volume, average_purchase_price=new_avg,
            )
            holdings[index] = merged
            logger.info(
                "Holding %s ampliado: vol=%.4f avg=%.5f", symbol, new_volume, new_avg,
            )
            return merged

        if not price > 0:
            # avg debe ser > 0 para que P/L% esté definido
            raise ValuationError(
                f"Price unavailable for {symbol} (precio {price})", symbol=symbol,
            )

        holding = Holding(
            symbol=symbol,
            average_purchase_price=price,
            volume=added_volume,
            purchase_date=now or datetime.now(timezone.utc),
        )
        holdings.append(holding)
        logger.info("Holding %s creado: vol=%.4f @ %.5f", symbol, added_volume, price)
        return holding

    def release(self, holdings: List[Holding], holding_id: str) -> Optional[Holding]:
        """Eliminar un holding por id. No-op si no existe."""
        for index, holding in enumerate(holdings):
            if holding.id == holding_id:
                del holdings[index]
                logger.info("Holding %s eliminado (%s)", holding_id, holding.symbol)
                return holding
        return None


def _index_of_symbol(holdings: List[Holding], symbol: str) -> Optional[int]:
    for index, holding in enumerate(holdings):
        if holding.symbol == symbol:
            return index
    return None


def portfolio_totals(valuated: Iterable[ValuatedHolding]) -> Dict[str, float]:
    """Totales agregados para API / export."""
    items = list(valuated)
    return {
        "total_value": sum(v.total_value for v in items),
        "total_profit_loss": sum(v.profit_loss for v in items),
        "holdings": len(items),
    }
