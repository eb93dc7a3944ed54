"""
Script para operar la ubicación del usuario desde la terminal.

Uso:
    python -m jotam.scripts.run_location show
    python -m jotam.scripts.run_location gps --lat -23.55 --lng -46.63
    python -m jotam.scripts.run_location search "01310-100"
    python -m jotam.scripts.run_location search "Centro, São Paulo"
    python -m jotam.scripts.run_location scope city
    python -m jotam.scripts.run_location edit-neighborhood "Bela Vista"
    python -m jotam.scripts.run_location check --city "Rio de Janeiro" --name "@minha_loja"
    python -m jotam.scripts.run_location neighborhoods --city "São Paulo"
"""

import argparse
import asyncio
import logging
import sys

import structlog

from jotam.config import get_settings
from jotam.database import NeighborhoodRepository, get_supabase_client
from jotam.gate import AccessDecisionKind
from jotam.gps import FixedDeviceLocator
from jotam.models import Scope
from jotam.session import LocationSession

# Configurar logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(message)s",
    force=True,
)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


def _print_state(session: LocationSession):
    location = session.location
    print("\n=== UBICACIÓN ===")
    print(f"Mostrando: {session.display_location} (scope: {session.scope.value})")
    if location:
        print(f"Condominio: {location.condo}")
        print(f"Barrio:     {location.neighborhood}")
        print(f"Ciudad:     {location.city}")
        print(f"Coords:     {location.latitude:.5f}, {location.longitude:.5f}")
    filters = session.scope_filter().as_dict()
    print(f"Filtro feed: {filters or 'sin filtro'}")


async def run(args: argparse.Namespace) -> int:
    locator = None
    if args.command == "gps":
        locator = FixedDeviceLocator(args.lat, args.lng)

    async with LocationSession.from_settings(settings, locator=locator) as session:
        if args.command == "gps":
            await session.request_location()
        elif args.command == "search":
            await session.search_location(args.text)
        elif args.command == "scope":
            session.set_scope(Scope(args.scope))
        elif args.command == "edit-neighborhood":
            if session.edit_neighborhood(args.name) is None:
                print("Nada para editar: defina uma localização e um bairro válido.")
                return 1
        elif args.command == "check":
            decision = session.check_access(
                args.city, args.neighborhood, args.name, bypass=args.bypass
            )
            print(f"\nDecisión: {decision.kind.value}")
            if decision.kind == AccessDecisionKind.BLOCK:
                print(decision.block.title)
                print(decision.block.message)
                print(f"[{decision.block.action_label}] -> {decision.block.action_target}")
            elif decision.kind == AccessDecisionKind.WARN:
                print(decision.banner.message)
            return 0
        elif args.command == "neighborhoods":
            city = args.city or (session.location.city if session.location else None)
            repo = NeighborhoodRepository(get_supabase_client())
            for row in repo.list_active(city):
                print(f"- {row['name']} ({row['city']})")
            return 0

        if session.error:
            print(f"\nErro: {session.error}")
            return 1

        _print_state(session)
    return 0


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Ubicación y scope del usuario")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("show", help="Muestra la ubicación actual")

    gps = subparsers.add_parser("gps", help="Resuelve la ubicación desde coordenadas")
    gps.add_argument("--lat", type=float, required=True)
    gps.add_argument("--lng", type=float, required=True)

    search = subparsers.add_parser("search", help="Busca por CEP o 'barrio, ciudad'")
    search.add_argument("text")

    scope = subparsers.add_parser("scope", help="Cambia el scope")
    scope.add_argument("scope", choices=[s.value for s in Scope])

    edit = subparsers.add_parser("edit-neighborhood", help="Corrige el barrio")
    edit.add_argument("name")

    check = subparsers.add_parser("check", help="Evalúa el acceso a un contenido")
    check.add_argument("--city", default=None)
    check.add_argument("--neighborhood", default=None)
    check.add_argument("--name", default=None, help="Nombre de la vitrina")
    check.add_argument("--bypass", action="store_true", help="Dueño o admin")

    neighborhoods = subparsers.add_parser("neighborhoods", help="Lista barrios activos")
    neighborhoods.add_argument("--city", default=None)

    args = parser.parse_args()

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        logger.info("Interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
