"""
Infrastructure Models Package.

Contiene los modelos ORM de SQLAlchemy para la persistencia.
Estos modelos representan la estructura de la base de datos,
NO las entidades de dominio.
"""

from fxtracker.infrastructure.persistence.models.key_value import KeyValueModel

__all__ = ["KeyValueModel"]
