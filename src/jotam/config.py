"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Encontrar la raíz del proyecto (donde está el .env)
# config.py -> jotam/ -> src/ -> jotam (project root)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: str = Field(..., description="URL del proyecto Supabase")
    supabase_key: str = Field(..., description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para operaciones admin"
    )

    # Geocoding
    google_maps_api_key: Optional[str] = Field(
        None, description="API key de Google Maps. Si falta se usa Nominatim"
    )
    google_geocode_url: str = Field(
        "https://maps.googleapis.com/maps/api/geocode/json",
        description="Endpoint de geocoding de Google",
    )
    nominatim_base_url: str = Field(
        "https://nominatim.openstreetmap.org",
        description="URL base de Nominatim (OpenStreetMap)",
    )
    nominatim_user_agent: str = Field(
        "jotam", description="User-Agent exigido por la política de Nominatim"
    )
    viacep_base_url: str = Field(
        "https://viacep.com.br/ws", description="URL base de ViaCEP (CEP brasileño)"
    )
    geocoding_language: str = Field("pt-BR", description="Idioma de las respuestas")
    geocoding_timeout: float = Field(
        10.0, gt=0, description="Timeout total de cada request de geocoding (segundos)"
    )

    # Coordenada fija para lookups por CEP (ViaCEP no devuelve coordenadas)
    postal_fallback_latitude: float = Field(-23.5505, ge=-90, le=90)
    postal_fallback_longitude: float = Field(-46.6333, ge=-180, le=180)

    # GPS del dispositivo
    gps_timeout: float = Field(10.0, gt=0, description="Timeout de la lectura GPS")
    gps_high_accuracy: bool = Field(True, description="Pedir alta precisión")
    gps_maximum_age: float = Field(
        0.0, ge=0, description="Edad máxima aceptada de un fix cacheado (0 = siempre fresco)"
    )

    # Cache local
    location_cache_path: Path = Field(
        _PROJECT_ROOT / ".cache" / "location.json",
        description="Archivo JSON donde se persiste ubicación y scope",
    )

    # Historial remoto
    history_queue_size: int = Field(
        100, ge=1, description="Máximo de escrituras de historial pendientes"
    )
    history_flush_timeout: float = Field(
        5.0, ge=0, description="Tiempo máximo para vaciar la cola al cerrar"
    )

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Constantes del sistema
UNKNOWN_NEIGHBORHOOD = "Unknown Neighborhood"
UNKNOWN_CITY = "Unknown City"
UNKNOWN_CONDO = "My Address"

LOCATION_PLACEHOLDER = "Definir localização"

LOCATION_CACHE_KEY = "jotam:location"
SCOPE_CACHE_KEY = "jotam:scope"

# Marcadores "desconocido" ya normalizados (minúsculas, sin acentos).
# Incluye los valores legados en portugués que todavía existen en la base.
UNKNOWN_PLACE_MARKERS = frozenset(
    {
        "unknown city",
        "unknown neighborhood",
        "desconhecido",
        "cidade desconhecida",
        "bairro desconhecido",
    }
)

HISTORY_TABLE = "location_history"
NEIGHBORHOODS_TABLE = "neighborhoods"

# Tablas con columnas city/neighborhood que se filtran por scope
SCOPED_CONTENT_TABLES = ["sellers", "products", "services", "service_providers"]
