"""Implementaciones concretas de repositorios."""
from fxtracker.infrastructure.persistence.repositories.holding_repository_impl import (
    HoldingRepositoryImpl,
)

__all__ = ["HoldingRepositoryImpl"]
