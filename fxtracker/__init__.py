"""FXTracker – seguimiento de pares forex en tiempo real y valoración de cartera."""

__version__ = "0.1.0"
