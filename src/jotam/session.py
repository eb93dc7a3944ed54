"""
Sesión de ubicación.

Objeto de contexto que se construye una vez al iniciar la app y se
inyecta en los consumidores (feed, búsqueda, perfil). Reemplaza al
estado global: no hay singletons de ubicación.
"""

from typing import Awaitable, Callable, Optional, Union

import structlog

from jotam.cache import LocalLocationCache
from jotam.config import Settings, get_settings
from jotam.database import LocationHistoryRepository, SupabaseClient, get_supabase_client
from jotam.errors import LocationError
from jotam.filters import ScopeFilter
from jotam.gate import AccessDecision, check_content, evaluate_access
from jotam.gps import DeviceLocator, UnsupportedDeviceLocator, acquire_position, position_options
from jotam.history import LocationHistoryRecorder
from jotam.models import ContentLocation, PositionOptions, ResolvedLocation, Scope
from jotam.resolver import LocationResolver
from jotam.store import LocationStore

logger = structlog.get_logger()


class LocationSession:
    """
    Expone la ubicación, el scope y los disparadores de resolución.

    - request_location(): GPS -> geocoding reverso. Un único pedido GPS
      a la vez; un segundo pedido mientras hay uno en curso se ignora.
    - search_location(text): CEP o texto libre.

    Ambos disparadores comparten un contador de generación: si llega
    tarde la respuesta de un pedido que ya fue superado, se descarta.
    Un error deja la ubicación anterior intacta.
    """

    def __init__(
        self,
        store: LocationStore,
        resolver: LocationResolver,
        locator: Optional[DeviceLocator] = None,
        recorder: Optional[LocationHistoryRecorder] = None,
        gps_options: Optional[PositionOptions] = None,
    ):
        self.store = store
        self.resolver = resolver
        self.locator = locator or UnsupportedDeviceLocator()
        self.recorder = recorder
        self.gps_options = gps_options or PositionOptions()
        self.last_error: Optional[LocationError] = None
        self._generation = 0
        self._pending = 0
        self._gps_pending = False

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        locator: Optional[DeviceLocator] = None,
        supabase: Optional[SupabaseClient] = None,
    ) -> "LocationSession":
        """Arma el grafo completo de dependencias desde la configuración."""
        settings = settings or get_settings()
        supabase = supabase or get_supabase_client()

        recorder = LocationHistoryRecorder(
            LocationHistoryRepository(supabase),
            supabase.current_user_id,
            max_pending=settings.history_queue_size,
            flush_timeout=settings.history_flush_timeout,
        )
        store = LocationStore(LocalLocationCache(settings.location_cache_path), recorder)
        return cls(
            store,
            LocationResolver(settings=settings),
            locator=locator,
            recorder=recorder,
            gps_options=position_options(settings),
        )

    async def __aenter__(self):
        """Context manager entry: carga el cache e inicia el historial."""
        self.store.initialize()
        if self.recorder is not None:
            self.recorder.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit: vacía el historial y cierra las sesiones HTTP."""
        if self.recorder is not None:
            await self.recorder.stop()
        await self.resolver.close()

    # Lectura

    @property
    def location(self) -> Optional[ResolvedLocation]:
        return self.store.location

    @property
    def scope(self) -> Scope:
        return self.store.scope

    @property
    def display_location(self) -> str:
        return self.store.display_location

    @property
    def is_loading(self) -> bool:
        return self._pending > 0

    @property
    def error(self) -> Optional[str]:
        """Mensaje para mostrar junto al control que disparó la resolución."""
        return self.last_error.message if self.last_error else None

    # Escritura

    def set_scope(self, scope: Union[Scope, str]):
        self.store.set_scope(scope)

    def edit_neighborhood(self, name: str) -> Optional[ResolvedLocation]:
        return self.store.edit_neighborhood(name)

    async def request_location(self) -> Optional[ResolvedLocation]:
        """Resuelve la ubicación a partir del GPS del dispositivo."""
        if self._gps_pending:
            logger.info("Lectura GPS en curso, pedido ignorado")
            return None

        self._gps_pending = True
        try:
            return await self._resolve(self._resolve_from_device)
        finally:
            self._gps_pending = False

    async def search_location(self, text: str) -> Optional[ResolvedLocation]:
        """Resuelve la ubicación a partir de un CEP o texto libre."""
        return await self._resolve(lambda: self.resolver.resolve_from_query(text))

    async def _resolve_from_device(self) -> ResolvedLocation:
        position = await acquire_position(self.locator, self.gps_options)
        return await self.resolver.resolve_from_coordinates(
            position.latitude, position.longitude
        )

    async def _resolve(
        self, resolve: Callable[[], Awaitable[ResolvedLocation]]
    ) -> Optional[ResolvedLocation]:
        self._generation += 1
        generation = self._generation
        self._pending += 1
        self.last_error = None

        try:
            location = await resolve()
        except LocationError as e:
            if generation == self._generation:
                self.last_error = e
            logger.info("No se pudo resolver la ubicación", code=e.code, detail=e.detail)
            return None
        finally:
            self._pending -= 1

        if generation != self._generation:
            logger.info("Respuesta de ubicación obsoleta descartada", generation=generation)
            return None

        self.store.update(location)
        return location

    # Consumidores

    def scope_filter(self) -> ScopeFilter:
        """Filtro para el feed y la búsqueda según ubicación y scope."""
        return ScopeFilter.for_location(self.store.location, self.store.scope)

    def check_access(
        self,
        content_city: Optional[str],
        content_neighborhood: Optional[str] = None,
        content_display_name: Optional[str] = None,
        bypass: bool = False,
    ) -> AccessDecision:
        return evaluate_access(
            self.store.location,
            content_city,
            content_neighborhood,
            content_display_name,
            bypass,
        )

    def check_content(self, content: ContentLocation, bypass: bool = False) -> AccessDecision:
        return check_content(self.store.location, content, bypass)
