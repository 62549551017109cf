"""Adaptadores a servicios externos (feed de mercado)."""
from fxtracker.infrastructure.external.finnhub_adapter import (
    FeedSubscription,
    FinnhubFeedConnection,
)

__all__ = ["FeedSubscription", "FinnhubFeedConnection"]
