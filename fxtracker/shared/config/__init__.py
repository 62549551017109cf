"""Configuración de la aplicación."""
from fxtracker.shared.config.settings import MAJOR_PAIRS, Settings

__all__ = ["MAJOR_PAIRS", "Settings"]
