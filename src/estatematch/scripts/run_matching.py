"""
Script para consultar el matching de una organización.

Imprime en JSON los mejores matches de un cliente, de una propiedad
o el resumen del dashboard.

Uso:
    python -m estatematch.scripts.run_matching --organization ORG --client CLIENT_ID
    python -m estatematch.scripts.run_matching --organization ORG --property PROPERTY_ID --min-score 50
    python -m estatematch.scripts.run_matching --organization ORG --analytics
"""

import argparse
import json
import logging
import sys

import structlog
from pydantic import ValidationError

from estatematch.config import get_settings
from estatematch.matching import MatchingEngine

# Configurar logging (a stderr: stdout queda para el JSON)
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(message)s",
    stream=sys.stderr,
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


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Matching de clientes y propiedades de una organización"
    )
    parser.add_argument("--organization", required=True, help="UUID de la organización")

    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--client", help="UUID del cliente a matchear")
    target.add_argument("--property", help="UUID de la propiedad a matchear")
    target.add_argument(
        "--analytics", action="store_true", help="Resumen de matching de la organización"
    )

    parser.add_argument("--min-score", type=float, default=None, help="Score mínimo (0-100)")
    parser.add_argument("--limit", type=int, default=None, help="Máximo de resultados")
    return parser


def run(args: argparse.Namespace, engine: MatchingEngine) -> dict:
    """Ejecuta la consulta pedida y devuelve el payload a imprimir."""
    if args.analytics:
        analytics = engine.analytics(args.organization)
        return analytics.model_dump(mode="json")

    if args.client:
        results = engine.matches_for_client(
            args.organization, args.client, min_score=args.min_score, limit=args.limit
        )
    else:
        results = engine.matches_for_property(
            args.organization, args.property, min_score=args.min_score, limit=args.limit
        )
    return {
        "count": len(results),
        "matches": [r.model_dump(mode="json") for r in results],
    }


def main(argv=None):
    """Entry point del script."""
    args = build_parser().parse_args(argv)
    logger.info("Iniciando consulta de matching", organization=args.organization)

    try:
        payload = run(args, MatchingEngine())
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        sys.exit(0)

    except KeyboardInterrupt:
        logger.info("Matching interrumpido por usuario")
        sys.exit(130)
    except (LookupError, ValidationError) as e:
        logger.error("Consulta inválida", error=str(e))
        sys.exit(1)
    except Exception as e:
        logger.error("Error fatal en matching", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
