"""Domain exceptions."""
from fxtracker.domain.exceptions.domain_errors import (
    DomainError,
    ValuationError,
    InvalidHoldingError,
    MalformedMessageError,
)

__all__ = [
    "DomainError",
    "ValuationError",
    "InvalidHoldingError",
    "MalformedMessageError",
]
