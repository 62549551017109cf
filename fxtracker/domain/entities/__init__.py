"""Domain entities."""
from fxtracker.domain.entities.holding import Holding, ValuatedHolding, new_holding_id

__all__ = ["Holding", "ValuatedHolding", "new_holding_id"]
