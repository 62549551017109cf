"""
FXTracker – Application Layer
==============================
Casos de uso, servicios de orquestación, puertos y estado en memoria.
"""
