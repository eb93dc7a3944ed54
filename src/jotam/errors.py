"""
Errores del sistema de ubicación.

Los errores visibles llevan un mensaje listo para mostrar al usuario (pt-BR).
Los errores internos (persistencia local, historial remoto) nunca llegan a la UI.
"""

from typing import Optional


class LocationError(Exception):
    """Error base del sistema de ubicación."""

    code: str = "location_error"
    default_message: str = "Não foi possível determinar sua localização."
    user_visible: bool = True

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class PermissionDenied(LocationError):
    """El usuario rechazó el acceso a la ubicación del dispositivo."""

    code = "permission_denied"
    default_message = "Permissão de localização negada."


class LocationTimeout(LocationError):
    """La lectura GPS no terminó dentro del timeout."""

    code = "timeout"
    default_message = "A localização demorou demais. Tente novamente."


class GeolocationUnavailable(LocationError):
    """El dispositivo no ofrece geolocalización."""

    code = "geolocation_unavailable"
    default_message = "Geolocalização não suportada neste dispositivo."


class ProviderUnavailable(LocationError):
    """Falla de red o del proveedor de geocoding."""

    code = "provider_unavailable"
    default_message = "Erro ao buscar endereço. Tente novamente."


class NoAddressFound(LocationError):
    """El proveedor respondió sin una dirección utilizable."""

    code = "no_address_found"
    default_message = "Não foi possível obter o endereço exato."


class NoResultsFound(LocationError):
    """La búsqueda por texto libre no devolvió resultados."""

    code = "no_results_found"
    default_message = "Nenhum resultado encontrado para essa busca."


class PersistenceUnavailable(LocationError):
    """No se pudo leer o escribir el cache local."""

    code = "persistence_unavailable"
    default_message = "Armazenamento local indisponível."
    user_visible = False


class HistoryWriteFailed(LocationError):
    """Falló la escritura del historial remoto."""

    code = "history_write_failed"
    default_message = "Falha ao salvar histórico de localização."
    user_visible = False
