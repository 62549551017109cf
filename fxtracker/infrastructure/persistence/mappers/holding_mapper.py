"""
FXTracker – Holding Mapper
===========================
Mapea entre Holding (domain entity) y su registro JSON persistido.

Las fechas se serializan en ISO-8601; al cargar se aceptan también
fechas naive (se asumen UTC).

Al cargar se revalidan las invariantes del Holding: un registro con
precio medio o volumen no positivo (o no finito) se rechaza con
InvalidHoldingError en vez de entrar en la cartera.
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from typing import Any, Dict, List

from fxtracker.domain.entities.holding import Holding
from fxtracker.domain.exceptions.domain_errors import InvalidHoldingError


def _positive(record: Dict[str, Any], field_name: str) -> float:
    value = float(record[field_name])
    if not math.isfinite(value) or value <= 0:
        raise InvalidHoldingError(
            f"Holding {record.get('id')!r}: {field_name} debe ser > 0, recibido {value}"
        )
    return value


class HoldingMapper:
    """
    Mapper bidireccional Holding ↔ dict JSON-serializable.
    """

    def to_record(self, holding: Holding) -> Dict[str, Any]:
        return {
            "id": holding.id,
            "symbol": holding.symbol,
            "average_purchase_price": holding.average_purchase_price,
            "volume": holding.volume,
            "purchase_date": holding.purchase_date.isoformat(),
        }

    def to_entity(self, record: Dict[str, Any]) -> Holding:
        """
        Raises:
            KeyError / TypeError / ValueError si el registro está corrupto.
            InvalidHoldingError si precio medio o volumen no son > 0.
        """
        purchase_date = datetime.fromisoformat(record["purchase_date"])
        if purchase_date.tzinfo is None:
            purchase_date = purchase_date.replace(tzinfo=timezone.utc)
        return Holding(
            id=str(record["id"]),
            symbol=str(record["symbol"]),
            average_purchase_price=_positive(record, "average_purchase_price"),
            volume=_positive(record, "volume"),
            purchase_date=purchase_date,
        )

    def dumps(self, holdings: List[Holding]) -> str:
        return json.dumps([self.to_record(h) for h in holdings])

    def loads(self, raw: str) -> List[Holding]:
        records = json.loads(raw)
        if not isinstance(records, list):
            raise ValueError("La cartera guardada no es una lista")
        return [self.to_entity(record) for record in records]
