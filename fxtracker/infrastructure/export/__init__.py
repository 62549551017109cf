"""Export de la cartera (CSV)."""
from fxtracker.infrastructure.export.csv_exporter import (
    CSV_HEADERS,
    export_filename,
    export_portfolio_csv,
    format_row,
)

__all__ = ["CSV_HEADERS", "export_filename", "export_portfolio_csv", "format_row"]
