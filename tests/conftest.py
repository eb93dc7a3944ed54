"""Test configuration."""

import os
from pathlib import Path

import pytest

# Credenciales falsas para que Settings() se pueda construir sin .env
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

from jotam.cache import LocalLocationCache
from jotam.config import Settings, UNKNOWN_NEIGHBORHOOD
from jotam.models import ResolvedLocation


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings aislados, con el cache en un directorio temporal."""
    return Settings(
        supabase_url="http://localhost:54321",
        supabase_key="test-anon-key",
        google_maps_api_key=None,
        location_cache_path=tmp_path / "location.json",
    )


@pytest.fixture
def google_settings(settings: Settings) -> Settings:
    return settings.model_copy(update={"google_maps_api_key": "test-google-key"})


@pytest.fixture
def cache(tmp_path: Path) -> LocalLocationCache:
    return LocalLocationCache(tmp_path / "location.json")


@pytest.fixture
def sao_paulo() -> ResolvedLocation:
    return ResolvedLocation(
        condo="Avenida Paulista, 1578",
        neighborhood="Bela Vista",
        city="São Paulo",
        latitude=-23.5613,
        longitude=-46.6565,
    )


@pytest.fixture
def unknown_neighborhood() -> ResolvedLocation:
    return ResolvedLocation(
        condo="Rodovia BR-116",
        neighborhood=UNKNOWN_NEIGHBORHOOD,
        city="Registro",
        latitude=-24.49,
        longitude=-47.84,
    )
