"""Application use cases."""
from fxtracker.application.use_cases.manage_portfolio_usecase import (
    ManagePortfolioUseCase,
    PortfolioSnapshot,
)
from fxtracker.application.use_cases.watchlist_usecase import WatchlistUseCase

__all__ = ["ManagePortfolioUseCase", "PortfolioSnapshot", "WatchlistUseCase"]
