"""Application services."""
from fxtracker.application.services.connection_supervisor import ConnectionSupervisor

__all__ = ["ConnectionSupervisor"]
