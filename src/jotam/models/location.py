"""
Modelo de Ubicación

Define la ubicación resuelta del usuario, el scope de visualización
y la ubicación declarada por el contenido (vitrinas, productos, servicios).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jotam.config import UNKNOWN_CITY, UNKNOWN_CONDO, UNKNOWN_NEIGHBORHOOD


class Scope(str, Enum):
    """Granularidad usada para mostrar la ubicación y filtrar contenido."""

    CONDO = "condo"
    NEIGHBORHOOD = "neighborhood"
    CITY = "city"

    @classmethod
    def default(cls) -> "Scope":
        return cls.NEIGHBORHOOD


def _label_or(value, sentinel: str) -> str:
    if value is None:
        return sentinel
    text = str(value).strip()
    return text or sentinel


class ResolvedLocation(BaseModel):
    """
    Ubicación resuelta a partir de GPS, CEP o búsqueda por texto.

    Es un valor inmutable: cualquier cambio produce una instancia nueva.
    Los tres labels nunca quedan vacíos, se reemplazan por los sentinels.
    """

    model_config = ConfigDict(frozen=True)

    condo: str = Field(UNKNOWN_CONDO, description="Calle, edificio o condominio")
    neighborhood: str = Field(UNKNOWN_NEIGHBORHOOD, description="Barrio")
    city: str = Field(UNKNOWN_CITY, description="Ciudad")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    @field_validator("condo", mode="before")
    @classmethod
    def _condo_label(cls, value):
        return _label_or(value, UNKNOWN_CONDO)

    @field_validator("neighborhood", mode="before")
    @classmethod
    def _neighborhood_label(cls, value):
        return _label_or(value, UNKNOWN_NEIGHBORHOOD)

    @field_validator("city", mode="before")
    @classmethod
    def _city_label(cls, value):
        return _label_or(value, UNKNOWN_CITY)

    @property
    def has_known_neighborhood(self) -> bool:
        return self.neighborhood != UNKNOWN_NEIGHBORHOOD

    @property
    def has_known_city(self) -> bool:
        return self.city != UNKNOWN_CITY

    def label_for(self, scope: Scope) -> str:
        """Devuelve el label correspondiente al scope."""
        if scope == Scope.CONDO:
            return self.condo
        if scope == Scope.NEIGHBORHOOD:
            return self.neighborhood
        return self.city

    def with_neighborhood(self, name: str) -> "ResolvedLocation":
        """Copia de la ubicación con el barrio reemplazado (edición manual)."""
        return ResolvedLocation(
            condo=self.condo,
            neighborhood=name.strip(),
            city=self.city,
            latitude=self.latitude,
            longitude=self.longitude,
        )


class ContentLocation(BaseModel):
    """
    Ubicación declarada por un contenido (vendedor, prestador, listing).

    Viene de la base de datos y se trata como no confiable: ambos campos
    son opcionales.
    """

    model_config = ConfigDict(from_attributes=True)

    city: Optional[str] = Field(None, description="Ciudad del contenido")
    neighborhood: Optional[str] = Field(None, description="Barrio del contenido")
    display_name: Optional[str] = Field(
        None, description="Nombre de la vitrina para mensajes de bloqueo"
    )


@dataclass(frozen=True)
class Coordinates:
    """Lectura de posición del dispositivo."""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class PositionOptions:
    """Opciones de una lectura GPS puntual."""

    enable_high_accuracy: bool = True
    timeout: float = 10.0
    maximum_age: float = 0.0
