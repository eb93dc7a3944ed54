"""
Filtros de ubicación para el feed y la búsqueda.

Traduce la ubicación actual y el scope en condiciones de igualdad
sobre las columnas city / neighborhood / condo del contenido.
"""

from dataclasses import dataclass
from typing import Optional

from jotam.config import UNKNOWN_CONDO
from jotam.models import ResolvedLocation, Scope


@dataclass(frozen=True)
class ScopeFilter:
    """Condiciones de ubicación; los campos en None no filtran."""

    city: Optional[str] = None
    neighborhood: Optional[str] = None
    condo: Optional[str] = None

    @classmethod
    def for_location(cls, location: Optional[ResolvedLocation], scope: Scope) -> "ScopeFilter":
        """
        Construye el filtro para una ubicación y un scope.

        Sin ubicación no se filtra. Los sentinels nunca se usan como
        filtro: un barrio desconocido deja el filtro a nivel ciudad.
        """
        if location is None or not location.has_known_city:
            return cls()

        city = location.city
        if scope == Scope.CITY or not location.has_known_neighborhood:
            return cls(city=city)
        if scope == Scope.NEIGHBORHOOD or location.condo == UNKNOWN_CONDO:
            return cls(city=city, neighborhood=location.neighborhood)
        return cls(city=city, neighborhood=location.neighborhood, condo=location.condo)

    @property
    def is_empty(self) -> bool:
        return not self.as_dict()

    def as_dict(self) -> dict:
        data = {"city": self.city, "neighborhood": self.neighborhood, "condo": self.condo}
        return {k: v for k, v in data.items() if v is not None}

    def apply(self, query):
        """Agrega un .eq() por condición a un query builder de Supabase."""
        for column, value in self.as_dict().items():
            query = query.eq(column, value)
        return query
