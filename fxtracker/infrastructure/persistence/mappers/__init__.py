"""Mappers entidad ↔ registro persistido."""
from fxtracker.infrastructure.persistence.mappers.holding_mapper import HoldingMapper

__all__ = ["HoldingMapper"]
