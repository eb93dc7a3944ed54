"""
Store de ubicación.

Único escritor de la ubicación actual y del scope. El resto de los
componentes sólo lee.
"""

from typing import Optional, Union

import structlog

from jotam.cache import LocalLocationCache, PersistResult
from jotam.config import LOCATION_PLACEHOLDER
from jotam.history import LocationHistoryRecorder
from jotam.models import ResolvedLocation, Scope

logger = structlog.get_logger()


class LocationStore:
    """
    Mantiene la ubicación resuelta y el scope preferido.

    Las mutaciones en memoria y la persistencia local terminan antes de
    devolver el control; el historial remoto se escribe en background.
    """

    def __init__(
        self,
        cache: LocalLocationCache,
        recorder: Optional[LocationHistoryRecorder] = None,
    ):
        self.cache = cache
        self.recorder = recorder
        self._location: Optional[ResolvedLocation] = None
        self._scope: Scope = Scope.default()

    @property
    def location(self) -> Optional[ResolvedLocation]:
        return self._location

    @property
    def scope(self) -> Scope:
        return self._scope

    @property
    def display_location(self) -> str:
        """Label visible según el scope, o el placeholder sin ubicación."""
        if self._location is None:
            return LOCATION_PLACEHOLDER
        return self._location.label_for(self._scope)

    def initialize(self):
        """Siembra el store desde el cache local."""
        self._location = self.cache.load_location()
        self._scope = self.cache.load_scope()
        logger.info(
            "Store de ubicación inicializado",
            has_location=self._location is not None,
            scope=self._scope.value,
        )

    def update(self, location: ResolvedLocation):
        """Reemplaza la ubicación completa."""
        self._location = location
        if not location.has_known_neighborhood:
            # Nunca dejar el scope apuntando a un barrio desconocido
            self._scope = Scope.CITY
        self._persist()
        self._record(location)

    def edit_neighborhood(self, name: str) -> Optional[ResolvedLocation]:
        """
        Corrige manualmente el barrio de la ubicación actual.

        Returns:
            La nueva ubicación, o None si no hay ubicación base o el nombre está vacío
        """
        if self._location is None or not (name or "").strip():
            return None

        self._location = self._location.with_neighborhood(name)
        self._scope = Scope.NEIGHBORHOOD
        self._persist()
        self._record(self._location)
        logger.info("Barrio editado manualmente", neighborhood=self._location.neighborhood)
        return self._location

    def set_scope(self, scope: Union[Scope, str]):
        """Cambia el scope. No valida que el label correspondiente sea conocido."""
        self._scope = Scope(scope)
        self._check_persisted(self.cache.save_scope(self._scope))

    def _persist(self):
        self._check_persisted(self.cache.save_location(self._location))
        self._check_persisted(self.cache.save_scope(self._scope))

    def _check_persisted(self, result: PersistResult):
        # El estado en memoria sigue siendo correcto para la sesión
        if not result.ok:
            logger.warning("Cache local no disponible, se ignora", error=result.error.detail)

    def _record(self, location: ResolvedLocation):
        if self.recorder is not None:
            self.recorder.record(location)
