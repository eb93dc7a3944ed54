"""
Abstracción de proveedores de geocoding.

Permite switchear entre Google Maps (pago, más preciso) y Nominatim
(OpenStreetMap, gratuito) sin que el resolver sepa cuál se usa.
ViaCEP se usa aparte, sólo para CEPs brasileños.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

import aiohttp
import structlog

from jotam.config import Settings, get_settings
from jotam.errors import NoAddressFound, NoResultsFound, ProviderUnavailable

logger = structlog.get_logger()


@dataclass
class GeocodedAddress:
    """Dirección normalizada de cualquier proveedor (campos aún sin sentinels)."""
    condo: Optional[str]
    neighborhood: Optional[str]
    city: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    provider: str


def first_present(source: dict, keys: Sequence[str]) -> Optional[str]:
    """Primer valor no vacío de `source` siguiendo el orden de preferencia."""
    for key in keys:
        value = source.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def street_label(road: Optional[str], number: Optional[str]) -> Optional[str]:
    if not road:
        return None
    return f"{road}, {number}" if number else road


class HttpJsonClient:
    """Base con una sesión aiohttp perezosa y GET JSON con errores normalizados."""

    provider_name: str = "base"

    def __init__(self, timeout: float, session: Optional[aiohttp.ClientSession] = None):
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    def _headers(self) -> dict:
        return {}

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout, headers=self._headers()
            )
            self._owns_session = True
        return self._session

    async def _get_json(self, url: str, params: Optional[dict] = None):
        session = await self._get_session()
        try:
            async with session.get(url, params=params) as response:
                response.raise_for_status()
                return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(
                "Error consultando proveedor de geocoding",
                provider=self.provider_name,
                error=str(e),
            )
            raise ProviderUnavailable(detail=str(e)) from e

    async def close(self):
        """Cierra la sesión HTTP si fue creada por el proveedor."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()


class BaseGeocodingProvider(HttpJsonClient, ABC):
    """Clase base para proveedores de geocoding."""

    @abstractmethod
    async def reverse_geocode(self, lat: float, lng: float) -> GeocodedAddress:
        """
        Convierte coordenadas en una dirección.

        Raises:
            ProviderUnavailable: falla de red o del proveedor
            NoAddressFound: respuesta sin dirección utilizable
        """
        pass

    @abstractmethod
    async def forward_geocode(self, query: str) -> GeocodedAddress:
        """
        Busca una dirección por texto libre (un único resultado).

        Raises:
            ProviderUnavailable: falla de red o del proveedor
            NoResultsFound: la búsqueda no devolvió resultados
        """
        pass


class GoogleGeocodingProvider(BaseGeocodingProvider):
    """
    Proveedor de Google Maps Geocoding API.

    Google suele devolver la calle exacta como primer resultado, pero el
    barrio (sublocality_level_1 en Brasil) aparece en resultados más amplios,
    por eso el barrio se busca en todos los resultados.

    Docs: https://developers.google.com/maps/documentation/geocoding
    """

    provider_name = "google"

    CONDO_TYPES = ("premise", "building")
    CITY_TYPES = ("locality", "administrative_area_level_2")
    NEIGHBORHOOD_PRECISE_TYPES = ("sublocality_level_1",)
    NEIGHBORHOOD_LOOSE_TYPES = ("sublocality", "neighborhood")

    def __init__(
        self,
        api_key: Optional[str] = None,
        settings: Optional[Settings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.settings = settings or get_settings()
        self.api_key = api_key or self.settings.google_maps_api_key

        if not self.api_key:
            raise ValueError("GOOGLE_MAPS_API_KEY no configurada")

        super().__init__(self.settings.geocoding_timeout, session)
        logger.info("GoogleGeocodingProvider inicializado")

    @staticmethod
    def _component(result: dict, types: Sequence[str]) -> Optional[str]:
        """Primer address_component del resultado cuyo tipo está en `types`, por orden de preferencia."""
        components = result.get("address_components") or []
        for wanted in types:
            for component in components:
                if wanted in component.get("types", []):
                    name = (component.get("long_name") or "").strip()
                    if name:
                        return name
        return None

    def _neighborhood(self, results: list[dict]) -> Optional[str]:
        for types in (self.NEIGHBORHOOD_PRECISE_TYPES, self.NEIGHBORHOOD_LOOSE_TYPES):
            for result in results:
                name = self._component(result, types)
                if name:
                    return name
        return None

    def _parse(self, results: list[dict], lat: Optional[float], lng: Optional[float]) -> GeocodedAddress:
        top = results[0]
        condo = self._component(top, self.CONDO_TYPES) or street_label(
            self._component(top, ("route",)),
            self._component(top, ("street_number",)),
        )

        if lat is None or lng is None:
            location = (top.get("geometry") or {}).get("location") or {}
            lat, lng = location.get("lat"), location.get("lng")

        return GeocodedAddress(
            condo=condo,
            neighborhood=self._neighborhood(results),
            city=self._component(top, self.CITY_TYPES),
            latitude=lat,
            longitude=lng,
            provider=self.provider_name,
        )

    async def _request(self, params: dict) -> list[dict]:
        data = await self._get_json(
            self.settings.google_geocode_url,
            {**params, "key": self.api_key, "language": self.settings.geocoding_language},
        )
        if not isinstance(data, dict):
            raise ProviderUnavailable(detail="Respuesta inesperada de Google")

        status = data.get("status")
        if status == "OK" and data.get("results"):
            return data["results"]
        if status in ("OK", "ZERO_RESULTS"):
            return []

        logger.warning(
            "Google geocoding respondió con error",
            status=status,
            error_message=data.get("error_message"),
        )
        raise ProviderUnavailable(detail=data.get("error_message") or status)

    async def reverse_geocode(self, lat: float, lng: float) -> GeocodedAddress:
        results = await self._request({"latlng": f"{lat},{lng}"})
        if not results:
            raise NoAddressFound()
        return self._parse(results, lat, lng)

    async def forward_geocode(self, query: str) -> GeocodedAddress:
        results = await self._request({"address": query})
        if not results:
            raise NoResultsFound()
        return self._parse(results[:1], None, None)


class NominatimProvider(BaseGeocodingProvider):
    """
    Proveedor gratuito de Nominatim (OpenStreetMap).

    Los tags de OSM para el barrio varían mucho en Brasil; el orden
    de preferencia prioriza los más precisos.

    Docs: https://nominatim.org/release-docs/latest/api/Overview/
    """

    provider_name = "nominatim"

    CONDO_TAGS = ("amenity", "building", "residential")
    NEIGHBORHOOD_TAGS = ("neighbourhood", "suburb", "city_district", "quarter", "village")
    CITY_TAGS = ("city", "town", "municipality")

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.settings = settings or get_settings()
        super().__init__(self.settings.geocoding_timeout, session)
        logger.info("NominatimProvider inicializado", url=self.settings.nominatim_base_url)

    def _headers(self) -> dict:
        return {"User-Agent": self.settings.nominatim_user_agent}

    def _base_params(self) -> dict:
        return {
            "format": "json",
            "addressdetails": 1,
            "accept-language": self.settings.geocoding_language,
        }

    def _parse(self, address: dict, lat, lng) -> GeocodedAddress:
        condo = first_present(address, self.CONDO_TAGS) or street_label(
            first_present(address, ("road",)),
            first_present(address, ("house_number",)),
        )
        try:
            latitude = float(lat) if lat is not None else None
            longitude = float(lng) if lng is not None else None
        except (TypeError, ValueError) as e:
            logger.warning("Coordenadas inválidas de Nominatim", lat=lat, lng=lng)
            raise ProviderUnavailable(detail=f"Coordenadas inválidas: {lat!r}, {lng!r}") from e

        return GeocodedAddress(
            condo=condo,
            neighborhood=first_present(address, self.NEIGHBORHOOD_TAGS),
            city=first_present(address, self.CITY_TAGS),
            latitude=latitude,
            longitude=longitude,
            provider=self.provider_name,
        )

    async def reverse_geocode(self, lat: float, lng: float) -> GeocodedAddress:
        data = await self._get_json(
            f"{self.settings.nominatim_base_url}/reverse",
            {**self._base_params(), "lat": lat, "lon": lng, "zoom": 18},
        )
        if not isinstance(data, dict) or not data.get("address"):
            error = data.get("error") if isinstance(data, dict) else None
            logger.info("Nominatim sin dirección", lat=lat, lng=lng, error=error)
            raise NoAddressFound(
                "Não foi possível obter o endereço exato pelo serviço gratuito."
            )
        return self._parse(data["address"], lat, lng)

    async def forward_geocode(self, query: str) -> GeocodedAddress:
        data = await self._get_json(
            f"{self.settings.nominatim_base_url}/search",
            {**self._base_params(), "q": query, "limit": 1},
        )
        if not isinstance(data, list) or not data:
            raise NoResultsFound()
        top = data[0]
        return self._parse(top.get("address") or {}, top.get("lat"), top.get("lon"))


class ViaCepProvider(HttpJsonClient):
    """
    Lookup de CEP (código postal brasileño, 8 dígitos) en ViaCEP.

    Es estructurado y confiable pero no devuelve coordenadas.

    Docs: https://viacep.com.br/
    """

    provider_name = "viacep"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.settings = settings or get_settings()
        super().__init__(self.settings.geocoding_timeout, session)

    async def lookup(self, cep: str) -> GeocodedAddress:
        """
        Busca un CEP ya normalizado (sólo dígitos).

        Raises:
            ProviderUnavailable: falla de red
            NoAddressFound: CEP inexistente
        """
        data = await self._get_json(f"{self.settings.viacep_base_url}/{cep}/json/")
        if not isinstance(data, dict) or data.get("erro"):
            logger.info("CEP no encontrado", cep=cep)
            raise NoAddressFound("CEP não encontrado.")

        return GeocodedAddress(
            condo=first_present(data, ("logradouro",)),
            neighborhood=first_present(data, ("bairro",)),
            city=first_present(data, ("localidade",)),
            latitude=None,
            longitude=None,
            provider=self.provider_name,
        )


def get_geocoding_provider(
    settings: Optional[Settings] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> BaseGeocodingProvider:
    """
    Factory para obtener el proveedor de geocoding configurado.

    Con GOOGLE_MAPS_API_KEY se usa Google; sin ella, Nominatim.
    La elección se hace una sola vez, al construir el resolver.
    """
    settings = settings or get_settings()

    if settings.google_maps_api_key:
        return GoogleGeocodingProvider(settings=settings, session=session)
    return NominatimProvider(settings=settings, session=session)
