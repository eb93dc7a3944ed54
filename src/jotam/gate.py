"""
Blindaje geográfico del contenido.

Decide si una vitrina, producto o servicio se muestra libremente,
con un aviso de barrio distinto, o se bloquea por ser de otra ciudad.

- Ciudad distinta: bloqueo total (acceso cruzado por link directo)
- Misma ciudad, barrio distinto: aviso no bloqueante
- Sin datos de ubicación en alguno de los lados: se permite
"""

import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from jotam.config import UNKNOWN_PLACE_MARKERS
from jotam.models import ContentLocation, ResolvedLocation


class AccessDecisionKind(str, Enum):
    ALLOW = "allow"
    WARN = "warn"
    BLOCK = "block"


@dataclass(frozen=True)
class MismatchBanner:
    """Aviso persistente arriba del contenido."""

    neighborhood: str
    message: str


@dataclass(frozen=True)
class BlockScreen:
    """Pantalla que reemplaza al contenido de otra ciudad."""

    title: str
    message: str
    viewer_city: str
    content_city: str
    action_label: str
    action_target: str = "/"


@dataclass(frozen=True)
class AccessDecision:
    kind: AccessDecisionKind
    banner: Optional[MismatchBanner] = None
    block: Optional[BlockScreen] = None

    @property
    def renders_content(self) -> bool:
        return self.kind != AccessDecisionKind.BLOCK


ALLOW = AccessDecision(AccessDecisionKind.ALLOW)


def normalize_place(text: str) -> str:
    """Minúsculas, sin acentos y sin espacios en los extremos."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.strip()


def _is_unknown(normalized: str) -> bool:
    return normalized in UNKNOWN_PLACE_MARKERS


def _block_screen(viewer: ResolvedLocation, content_city: str, display_name: Optional[str]) -> BlockScreen:
    owner = display_name or "Esta vitrine"
    return BlockScreen(
        title="Conteúdo fora da sua área",
        message=(
            f"{owner} atende exclusivamente a cidade de {content_city}. "
            f"Você está em {viewer.city}. O conteúdo é exclusivo para quem está na mesma região."
        ),
        viewer_city=viewer.city,
        content_city=content_city,
        action_label=f"Ver o que rola em {viewer.city}",
    )


def _banner(content_neighborhood: str) -> MismatchBanner:
    return MismatchBanner(
        neighborhood=content_neighborhood,
        message=(
            f"Este vendedor está localizado no bairro {content_neighborhood}. "
            "Confirme a disponibilidade de atendimento na sua área antes de realizar um pedido."
        ),
    )


def evaluate_access(
    viewer: Optional[ResolvedLocation],
    content_city: Optional[str],
    content_neighborhood: Optional[str] = None,
    content_display_name: Optional[str] = None,
    bypass: bool = False,
) -> AccessDecision:
    """
    Decide cómo renderizar un contenido según la ubicación del usuario.

    Args:
        viewer: Ubicación actual del usuario (None si todavía no hay)
        content_city: Ciudad del contenido
        content_neighborhood: Barrio del contenido
        content_display_name: Nombre para el mensaje de bloqueo
        bypass: True para el dueño del contenido o un administrador

    Returns:
        AccessDecision ALLOW, WARN (con banner) o BLOCK (con pantalla)
    """
    if bypass or viewer is None or not content_city or not content_city.strip():
        return ALLOW

    target_city = normalize_place(content_city)
    if normalize_place(viewer.city) != target_city and not _is_unknown(target_city):
        return AccessDecision(
            AccessDecisionKind.BLOCK,
            block=_block_screen(viewer, content_city.strip(), content_display_name),
        )

    if not content_neighborhood or not content_neighborhood.strip():
        return ALLOW

    viewer_neighborhood = normalize_place(viewer.neighborhood)
    target_neighborhood = normalize_place(content_neighborhood)
    if (
        viewer_neighborhood != target_neighborhood
        and not _is_unknown(viewer_neighborhood)
        and not _is_unknown(target_neighborhood)
    ):
        return AccessDecision(
            AccessDecisionKind.WARN, banner=_banner(content_neighborhood.strip())
        )

    return ALLOW


def check_content(
    viewer: Optional[ResolvedLocation],
    content: ContentLocation,
    bypass: bool = False,
) -> AccessDecision:
    return evaluate_access(
        viewer,
        content.city,
        content.neighborhood,
        content.display_name,
        bypass,
    )
