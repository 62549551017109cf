"""
FXTracker – KeyValue ORM Model
===============================
Tabla `key_values`: store clave → valor JSON.

DECISIONES DE DISEÑO:

- key es la PK (la cartera vive bajo una clave fija).
- value es TEXT con JSON serializado; el core no conoce el esquema.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fxtracker.infrastructure.persistence.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueModel(Base):
    """Modelo ORM para el key-value store local."""

    __tablename__ = "key_values"

    # ─── Columnas ─────────────────────────────────────────────────────
    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<KeyValue(key='{self.key}', bytes={len(self.value or '')})>"
