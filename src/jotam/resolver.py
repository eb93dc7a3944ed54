"""
Resolución de ubicación.

Convierte coordenadas del dispositivo o una búsqueda de texto (CEP o
"barrio, ciudad") en una ResolvedLocation normalizada.

Flujo:
1. Coordenadas -> geocoding reverso con el proveedor configurado
2. Texto con exactamente 8 dígitos -> ViaCEP (coordenada fija de fallback)
3. Cualquier otro texto -> búsqueda directa, un único resultado
"""

import re
from typing import Optional

import structlog

from jotam.config import Settings, get_settings
from jotam.errors import NoResultsFound
from jotam.geocoding import (
    BaseGeocodingProvider,
    GeocodedAddress,
    ViaCepProvider,
    get_geocoding_provider,
)
from jotam.models import ResolvedLocation

logger = structlog.get_logger()

_NON_DIGITS = re.compile(r"\D")
POSTAL_CODE_DIGITS = 8


def postal_code_digits(text: str) -> Optional[str]:
    """Devuelve el CEP normalizado si el texto tiene exactamente 8 dígitos."""
    digits = _NON_DIGITS.sub("", text or "")
    return digits if len(digits) == POSTAL_CODE_DIGITS else None


def is_postal_code(text: str) -> bool:
    return postal_code_digits(text) is not None


class LocationResolver:
    """
    Resolver sin estado: no persiste nada ni reintenta.

    Los errores (ProviderUnavailable, NoAddressFound, NoResultsFound)
    se propagan al llamador para que los muestre al usuario.
    """

    def __init__(
        self,
        provider: Optional[BaseGeocodingProvider] = None,
        postal_provider: Optional[ViaCepProvider] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.provider = provider or get_geocoding_provider(self.settings)
        self.postal_provider = postal_provider or ViaCepProvider(self.settings)

    def _to_location(
        self,
        address: GeocodedAddress,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
    ) -> ResolvedLocation:
        latitude = address.latitude if address.latitude is not None else lat
        longitude = address.longitude if address.longitude is not None else lng

        # Los validadores del modelo sustituyen los sentinels
        return ResolvedLocation(
            condo=address.condo,
            neighborhood=address.neighborhood,
            city=address.city,
            latitude=latitude,
            longitude=longitude,
        )

    async def resolve_from_coordinates(self, lat: float, lng: float) -> ResolvedLocation:
        """Geocoding reverso de una lectura GPS."""
        address = await self.provider.reverse_geocode(lat, lng)
        # Se conservan las coordenadas del dispositivo, no las del proveedor
        location = ResolvedLocation(
            condo=address.condo,
            neighborhood=address.neighborhood,
            city=address.city,
            latitude=lat,
            longitude=lng,
        )
        logger.info(
            "Ubicación resuelta por coordenadas",
            provider=address.provider,
            city=location.city,
            neighborhood=location.neighborhood,
        )
        return location

    async def resolve_from_query(self, text: str) -> ResolvedLocation:
        """Resuelve un CEP o una búsqueda de texto libre."""
        cep = postal_code_digits(text)
        if cep:
            address = await self.postal_provider.lookup(cep)
            location = self._to_location(
                address,
                self.settings.postal_fallback_latitude,
                self.settings.postal_fallback_longitude,
            )
        else:
            query = (text or "").strip()
            if not query:
                raise NoResultsFound("Digite um endereço, bairro ou CEP.")
            address = await self.provider.forward_geocode(query)
            if address.latitude is None or address.longitude is None:
                raise NoResultsFound()
            location = self._to_location(address)

        logger.info(
            "Ubicación resuelta por búsqueda",
            provider=address.provider,
            postal_code=bool(cep),
            city=location.city,
            neighborhood=location.neighborhood,
        )
        return location

    async def close(self):
        """Libera las sesiones HTTP de los proveedores."""
        await self.provider.close()
        await self.postal_provider.close()
