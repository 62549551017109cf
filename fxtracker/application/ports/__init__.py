"""Application ports (interfaces hacia infraestructura)."""
from fxtracker.application.ports.feed_connection import (
    BatchHandler,
    FeedConnectionError,
    IFeedConnection,
)

__all__ = ["BatchHandler", "FeedConnectionError", "IFeedConnection"]
