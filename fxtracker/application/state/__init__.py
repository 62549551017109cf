"""Estado en memoria de la aplicación."""
from fxtracker.application.state.tracker_context import ConnectionStatus, TrackerContext

__all__ = ["ConnectionStatus", "TrackerContext"]
