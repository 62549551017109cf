"""
FXTracker – Domain Layer
=========================
Entidades, value objects, servicios de dominio y excepciones.
Sin dependencias de infraestructura.
"""
