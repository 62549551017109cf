"""Capa de presentación (API REST)."""
