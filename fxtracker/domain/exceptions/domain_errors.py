"""
FXTracker – Domain Exceptions
==============================
Excepciones específicas del dominio de negocio.

Estas excepciones capturan errores de lógica de negocio,
NO errores técnicos (esos van en application/ports).

JERARQUÍA:
    DomainError (base)
    ├── ValuationError          (acquire sin precio observado)
    ├── InvalidHoldingError     (volumen no positivo)
    └── MalformedMessageError   (mensaje del feed inválido; nunca se propaga)
"""

from __future__ import annotations


class DomainError(Exception):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class ValuationError(DomainError):
    """No hay precio para costear el símbolo solicitado."""

    def __init__(self, message: str, symbol: str | None = None):
        super().__init__(message, code="PRICE_UNAVAILABLE")
        self.symbol = symbol


class InvalidHoldingError(DomainError):
    """Datos de holding inválidos (volumen <= 0)."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_HOLDING")


class MalformedMessageError(DomainError):
    """Mensaje del feed mal formado. El parser lo captura y descarta."""

    def __init__(self, message: str, raw: str | bytes | None = None):
        super().__init__(message, code="MALFORMED_MESSAGE")
        self.raw = raw
