"""
Adquisición de posición del dispositivo.

Una lectura puntual, de alta precisión, con timeout y sin aceptar
fixes cacheados. La exclusión mutua (un único pedido a la vez) es
responsabilidad de la sesión, no del locator.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

import structlog

from jotam.config import Settings
from jotam.errors import GeolocationUnavailable, LocationTimeout
from jotam.models import Coordinates, PositionOptions

logger = structlog.get_logger()


def position_options(settings: Settings) -> PositionOptions:
    return PositionOptions(
        enable_high_accuracy=settings.gps_high_accuracy,
        timeout=settings.gps_timeout,
        maximum_age=settings.gps_maximum_age,
    )


class DeviceLocator(ABC):
    """Capacidad de geolocalización de la plataforma."""

    @abstractmethod
    async def current_position(self, options: PositionOptions) -> Coordinates:
        """
        Lee la posición actual.

        Raises:
            PermissionDenied: el usuario negó el acceso
            GeolocationUnavailable: la plataforma no ofrece geolocalización
        """
        pass


class FixedDeviceLocator(DeviceLocator):
    """Locator que devuelve una posición conocida (CLI, integraciones)."""

    def __init__(self, latitude: float, longitude: float, accuracy: Optional[float] = None):
        self._position = Coordinates(latitude, longitude, accuracy)

    async def current_position(self, options: PositionOptions) -> Coordinates:
        return self._position


class UnsupportedDeviceLocator(DeviceLocator):
    """Plataforma sin geolocalización."""

    async def current_position(self, options: PositionOptions) -> Coordinates:
        raise GeolocationUnavailable()


async def acquire_position(locator: DeviceLocator, options: PositionOptions) -> Coordinates:
    """Lee la posición aplicando el timeout de las opciones."""
    try:
        return await asyncio.wait_for(
            locator.current_position(options), timeout=options.timeout
        )
    except asyncio.TimeoutError as e:
        logger.info("Timeout leyendo GPS", timeout=options.timeout)
        raise LocationTimeout() from e
