"""
Historial remoto de ubicaciones.

Cola en background: registrar una ubicación nunca bloquea al llamador.
Las fallas se loguean y se descartan, sin reintentos ni aviso al usuario.
"""

import asyncio
from typing import Callable, Optional

import structlog

from jotam.database import LocationHistoryRepository
from jotam.errors import HistoryWriteFailed
from jotam.models import LocationHistoryEntry, ResolvedLocation

logger = structlog.get_logger()


class LocationHistoryRecorder:
    """
    Escribe el historial de ubicaciones del usuario autenticado.

    Flujo:
    1. record() encola la ubicación (put_nowait, descarta si la cola está llena)
    2. El worker obtiene el usuario de la sesión; sin usuario no se escribe
    3. Inserta en Supabase en un thread para no bloquear el event loop

    Dos escrituras rápidas pueden llegar desordenadas; es aceptable
    para datos de auditoría.
    """

    def __init__(
        self,
        repository: LocationHistoryRepository,
        user_id_provider: Callable[[], Optional[str]],
        max_pending: int = 100,
        flush_timeout: float = 5.0,
    ):
        self.repository = repository
        self.user_id_provider = user_id_provider
        self.flush_timeout = flush_timeout
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_pending)
        self._worker: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self):
        """Inicia el worker. Requiere un event loop corriendo."""
        if self.is_running:
            return
        self._worker = asyncio.create_task(self._run(), name="location-history")
        logger.debug("Worker de historial iniciado")

    async def stop(self):
        """Intenta vaciar la cola dentro del timeout y detiene el worker."""
        if not self.is_running:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=self.flush_timeout)
        except asyncio.TimeoutError:
            logger.warning("Historial pendiente descartado al cerrar", pending=self._queue.qsize())

        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        logger.debug("Worker de historial detenido")

    def record(self, location: ResolvedLocation) -> bool:
        """
        Encola una ubicación para el historial.

        Returns:
            True si quedó encolada, False si se descartó
        """
        if not self.is_running:
            logger.debug("Historial no iniciado, ubicación descartada")
            return False
        try:
            self._queue.put_nowait(location)
        except asyncio.QueueFull:
            logger.warning("Cola de historial llena, ubicación descartada")
            return False
        return True

    async def _run(self):
        while True:
            location = await self._queue.get()
            try:
                await self._write(location)
            except HistoryWriteFailed as e:
                logger.warning("Error al guardar historial de ubicación", error=e.detail)
            finally:
                self._queue.task_done()

    async def _write(self, location: ResolvedLocation):
        try:
            user_id = await asyncio.to_thread(self.user_id_provider)
            if not user_id:
                return
            entry = LocationHistoryEntry.from_location(user_id, location)
            await asyncio.to_thread(self.repository.create, entry)
        except Exception as e:
            raise HistoryWriteFailed(detail=str(e)) from e
