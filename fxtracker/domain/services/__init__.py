"""Domain services (lógica pura, sin I/O)."""
from fxtracker.domain.services.instruments import format_symbol
from fxtracker.domain.services.portfolio_valuator import PortfolioValuator, portfolio_totals
from fxtracker.domain.services.trade_reconciler import TradeReconciler, compute_change

__all__ = [
    "format_symbol",
    "PortfolioValuator",
    "portfolio_totals",
    "TradeReconciler",
    "compute_change",
]
