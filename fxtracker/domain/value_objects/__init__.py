"""Domain value objects."""
from fxtracker.domain.value_objects.connection_state import ConnectionState
from fxtracker.domain.value_objects.tick import Direction, PriceRecord, Tick

__all__ = ["ConnectionState", "Direction", "PriceRecord", "Tick"]
