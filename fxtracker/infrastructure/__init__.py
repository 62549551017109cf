"""
FXTracker – Infrastructure Layer
=================================
Implementaciones concretas: WebSocket Finnhub, base de datos, export CSV.
"""
