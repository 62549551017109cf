"""Domain repository interfaces."""
from fxtracker.domain.repositories.holding_repository import IHoldingRepository

__all__ = ["IHoldingRepository"]
