"""
Modelos de datos del sistema.

- ResolvedLocation / Scope: estado de ubicación del usuario
- ContentLocation: ubicación declarada por el contenido
- LocationHistoryEntry: auditoría remota de ubicaciones
"""

from jotam.models.location import (
    ResolvedLocation,
    Scope,
    ContentLocation,
    Coordinates,
    PositionOptions,
)
from jotam.models.history import LocationHistoryEntry

__all__ = [
    # Ubicación
    "ResolvedLocation",
    "Scope",
    "ContentLocation",
    "Coordinates",
    "PositionOptions",
    # Historial
    "LocationHistoryEntry",
]
