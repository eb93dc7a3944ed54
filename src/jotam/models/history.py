"""
Modelo del historial de ubicaciones.

Registro append-only en Supabase, sólo para usuarios autenticados.
"""

from typing import Optional

from pydantic import BaseModel, Field

from jotam.models.location import ResolvedLocation


class LocationHistoryEntry(BaseModel):
    """
    Una entrada del historial de ubicaciones de un usuario.

    created_at lo completa Supabase con el default de la columna.
    """

    id: Optional[str] = Field(None, description="UUID generado por Supabase")
    user_id: str = Field(..., description="FK al usuario autenticado")
    lat: float = Field(..., description="Latitud")
    lng: float = Field(..., description="Longitud")
    city: str = Field(..., description="Ciudad resuelta")
    neighborhood: str = Field(..., description="Barrio resuelto")

    @classmethod
    def from_location(
        cls, user_id: str, location: ResolvedLocation
    ) -> "LocationHistoryEntry":
        return cls(
            user_id=user_id,
            lat=location.latitude,
            lng=location.longitude,
            city=location.city,
            neighborhood=location.neighborhood,
        )

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para inserción en Supabase."""
        return self.model_dump(exclude={"id"})
