"""Persistencia (SQLAlchemy async)."""
