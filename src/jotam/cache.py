"""
Cache local de ubicación y scope.

Archivo JSON clave-valor con dos claves. Es sólo un cache: al iniciar
siembra el store una vez, después el store es la fuente de verdad.
Las escrituras devuelven un PersistResult en lugar de lanzar excepciones,
así el llamador decide explícitamente ignorar el error.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from jotam.config import LOCATION_CACHE_KEY, SCOPE_CACHE_KEY
from jotam.errors import PersistenceUnavailable
from jotam.models import ResolvedLocation, Scope

logger = structlog.get_logger()


@dataclass
class PersistResult:
    """Resultado de una escritura en el cache local."""

    ok: bool
    error: Optional[PersistenceUnavailable] = None


class LocalLocationCache:
    """Almacenamiento durable clave-valor sobre un archivo JSON."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> dict:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning("No se pudo leer el cache local", path=str(self.path), error=str(e))
            return {}
        except UnicodeDecodeError:
            logger.warning("Cache local con bytes inválidos, se ignora", path=str(self.path))
            return {}

        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Cache local corrupto, se ignora", path=str(self.path))
            return {}
        return data if isinstance(data, dict) else {}

    def _write_key(self, key: str, value: str) -> PersistResult:
        data = self._read_all()
        data[key] = value
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            return PersistResult(ok=False, error=PersistenceUnavailable(detail=str(e)))
        return PersistResult(ok=True)

    def load_location(self) -> Optional[ResolvedLocation]:
        """Ubicación cacheada, o None si falta o no es válida."""
        raw = self._read_all().get(LOCATION_CACHE_KEY)
        if not isinstance(raw, str):
            return None
        try:
            return ResolvedLocation.model_validate_json(raw)
        except ValidationError:
            logger.warning("Ubicación cacheada inválida, se ignora")
            return None

    def load_scope(self) -> Scope:
        """Scope cacheado, o el default si falta o no es válido."""
        raw = self._read_all().get(SCOPE_CACHE_KEY)
        try:
            return Scope(raw)
        except ValueError:
            return Scope.default()

    def save_location(self, location: ResolvedLocation) -> PersistResult:
        return self._write_key(LOCATION_CACHE_KEY, location.model_dump_json())

    def save_scope(self, scope: Scope) -> PersistResult:
        return self._write_key(SCOPE_CACHE_KEY, Scope(scope).value)
