"""
Módulo de base de datos.

Provee acceso a Supabase y a las tablas de ubicación.
"""

from jotam.database.supabase_client import get_supabase_client, SupabaseClient
from jotam.database.repositories import (
    LocationHistoryRepository,
    NeighborhoodRepository,
    ContentRepository,
)

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "LocationHistoryRepository",
    "NeighborhoodRepository",
    "ContentRepository",
]
