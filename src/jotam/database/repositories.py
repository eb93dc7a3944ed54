"""
Repositorios para operaciones en Supabase.

Cada repositorio maneja una tabla/entidad específica.
"""

from typing import TYPE_CHECKING, Optional

import structlog

from jotam.config import HISTORY_TABLE, NEIGHBORHOODS_TABLE
from jotam.database.supabase_client import get_supabase_client, SupabaseClient
from jotam.models import LocationHistoryEntry

if TYPE_CHECKING:
    from jotam.filters import ScopeFilter

logger = structlog.get_logger()


class BaseRepository:
    """Clase base para repositorios."""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client


class LocationHistoryRepository(BaseRepository):
    """Repositorio para el historial de ubicaciones (append-only)."""

    TABLE = HISTORY_TABLE

    def create(self, entry: LocationHistoryEntry) -> dict:
        """
        Inserta una entrada de historial.

        Returns:
            El registro insertado con su ID
        """
        data = entry.to_db_dict()
        response = self.client.table(self.TABLE).insert(data).execute()
        logger.debug(
            "Historial de ubicación registrado",
            user_id=entry.user_id,
            city=entry.city,
            neighborhood=entry.neighborhood,
        )
        return response.data[0] if response.data else {}

    def get_user_history(self, user_id: str, limit: int = 50) -> list[dict]:
        """Obtiene el historial de ubicaciones de un usuario, más reciente primero."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data


class NeighborhoodRepository(BaseRepository):
    """Repositorio para el catálogo de barrios habilitados."""

    TABLE = NEIGHBORHOODS_TABLE

    def list_active(self, city: Optional[str] = None) -> list[dict]:
        """Barrios activos, opcionalmente de una ciudad, ordenados por nombre."""
        query = self.client.table(self.TABLE).select("*").eq("is_active", True)
        if city:
            query = query.eq("city", city)
        response = query.order("name").execute()
        return response.data


class ContentRepository(BaseRepository):
    """Consultas del feed y la búsqueda limitadas al scope del usuario."""

    def search_in_scope(
        self,
        table: str,
        scope_filter: "ScopeFilter",
        text: Optional[str] = None,
        text_column: str = "name",
        limit: int = 50,
    ) -> list[dict]:
        """
        Búsqueda en una tabla de contenido filtrada por ubicación.

        Returns:
            Lista de registros dentro del scope
        """
        query = scope_filter.apply(self.client.table(table).select("*"))
        if text and text.strip():
            query = query.ilike(text_column, f"%{text.strip()}%")

        response = query.order("created_at", desc=True).limit(limit).execute()
        logger.info(
            "Búsqueda por scope",
            table=table,
            filters=scope_filter.as_dict(),
            results=len(response.data),
        )
        return response.data
