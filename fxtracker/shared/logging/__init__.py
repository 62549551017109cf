"""Logging centralizado."""
from fxtracker.shared.logging.logger import setup_logging, get_logger

__all__ = ["setup_logging", "get_logger"]
