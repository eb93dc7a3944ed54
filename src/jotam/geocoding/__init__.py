"""
Módulo de geocoding.

Provee geocoding directo/reverso (Google, Nominatim) y lookup de CEP (ViaCEP).
"""

from jotam.geocoding.providers import (
    BaseGeocodingProvider,
    GeocodedAddress,
    GoogleGeocodingProvider,
    NominatimProvider,
    ViaCepProvider,
    get_geocoding_provider,
)

__all__ = [
    "BaseGeocodingProvider",
    "GeocodedAddress",
    "GoogleGeocodingProvider",
    "NominatimProvider",
    "ViaCepProvider",
    "get_geocoding_provider",
]
