"""
Cliente de Supabase.

Singleton para conexión a la base de datos y a la sesión de auth.
"""

from functools import lru_cache
from typing import Optional

import structlog
from supabase import create_client, Client

from jotam.config import get_settings

logger = structlog.get_logger()


class SupabaseClient:
    """Wrapper del cliente de Supabase con métodos de utilidad."""

    def __init__(self, client: Client):
        self._client = client

    @property
    def client(self) -> Client:
        """Acceso directo al cliente de Supabase."""
        return self._client

    def table(self, name: str):
        """Acceso a una tabla específica."""
        return self._client.table(name)

    def current_user_id(self) -> Optional[str]:
        """
        ID del usuario autenticado en la sesión actual.

        Returns:
            UUID del usuario o None si no hay sesión
        """
        session = self._client.auth.get_session()
        if session is None or session.user is None:
            return None
        return session.user.id


@lru_cache
def get_supabase_client() -> SupabaseClient:
    """
    Obtiene el cliente de Supabase (singleton cacheado).

    Returns:
        SupabaseClient configurado

    Raises:
        ValueError: Si las credenciales no están configuradas
    """
    settings = get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError(
            "SUPABASE_URL y SUPABASE_KEY son requeridos. "
            "Configura las variables de entorno."
        )

    # Usar service key si está disponible para operaciones admin
    key = settings.supabase_service_key or settings.supabase_key

    client = create_client(settings.supabase_url, key)
    logger.info("Cliente de Supabase inicializado", url=settings.supabase_url)

    return SupabaseClient(client)
