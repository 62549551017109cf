"""
Holding Repository Implementation.

Implementación concreta del repositorio de holdings usando SQLAlchemy.
La lista completa se guarda como JSON bajo una clave fija de la tabla
key_values.

Clean Architecture: Esta clase está en infrastructure y depende de domain.
El dominio NO conoce esta implementación.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import select

from fxtracker.domain.entities.holding import Holding
from fxtracker.domain.exceptions.domain_errors import DomainError
from fxtracker.domain.repositories.holding_repository import IHoldingRepository
from fxtracker.infrastructure.persistence.database import DatabaseManager
from fxtracker.infrastructure.persistence.mappers.holding_mapper import HoldingMapper
from fxtracker.infrastructure.persistence.models import KeyValueModel
from fxtracker.shared.logging.logger import get_logger

logger = get_logger("infrastructure.holding_repository")


class HoldingRepositoryImpl(IHoldingRepository):
    """
    Implementación async del repositorio de holdings.

    Cada save() es una transacción propia (upsert de la clave).
    """

    def __init__(self, db: DatabaseManager, storage_key: str):
        self._db = db
        self._key = storage_key
        self._mapper = HoldingMapper()

    async def load(self) -> List[Holding]:
        async with self._db.session() as session:
            result = await session.execute(
                select(KeyValueModel.value).where(KeyValueModel.key == self._key)
            )
            raw = result.scalar_one_or_none()

        if raw is None:
            return []
        try:
            return self._mapper.loads(raw)
        except (ValueError, KeyError, TypeError, DomainError) as e:
            # Cartera corrupta: se arranca vacía, el valor guardado no se toca
            logger.error(
                "Cartera guardada bajo '%s' ilegible, se ignora: %s", self._key, e,
                exc_info=True,
            )
            return []

    async def save(self, holdings: List[Holding]) -> None:
        payload = self._mapper.dumps(holdings)
        async with self._db.session() as session:
            model = await session.get(KeyValueModel, self._key)
            if model is None:
                session.add(KeyValueModel(key=self._key, value=payload))
            else:
                model.value = payload
            await session.commit()
        logger.debug("Cartera guardada: %d holdings bajo '%s'", len(holdings), self._key)
