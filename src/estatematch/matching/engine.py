"""
Motor de matching entre clientes y propiedades de una organización.

Implementa:
- Carga: lee clientes y propiedades activos desde los repositorios
- Ranking: delega el scoring al RankingAssembler
- Dashboard: agrega todos los pares de la organización en analytics
"""

from typing import Optional

import structlog

from estatematch.config import Settings, get_settings
from estatematch.matching.analytics import build_match_analytics, summary_stats
from estatematch.matching.normalizers import CriteriaNormalizer
from estatematch.matching.ranking import RankingAssembler
from estatematch.matching.scorer import MatchScorer
from estatematch.models import (
    CandidateListing,
    MatchAnalytics,
    MatchResult,
    MatchSummaryStats,
    RequirementProfile,
)

logger = structlog.get_logger()

NOTES_SEPARATOR = "\n\n---\n\n"


class MatchingEngine:
    """
    Orquesta lectura de datos y ranking para una organización.

    Flujo:
    1. Obtener clientes/propiedades de la organización en estados activos
    2. Construir RequirementProfile / CandidateListing desde las filas
    3. Rankear con RankingAssembler (min_score y limit desde settings
       si no se pasan explícitamente)
    """

    def __init__(
        self,
        client_repo=None,
        property_repo=None,
        assembler: Optional[RankingAssembler] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()

        if client_repo is None or property_repo is None:
            from estatematch.database import ClientRepository, PropertyRepository

            client_repo = client_repo or ClientRepository()
            property_repo = property_repo or PropertyRepository()
        self.client_repo = client_repo
        self.property_repo = property_repo

        self.assembler = assembler or RankingAssembler(
            MatchScorer(
                normalizer=CriteriaNormalizer(
                    exchange_rates=self.settings.exchange_rates,
                    base_currency=self.settings.base_currency,
                ),
                budget_tolerance_percent=self.settings.budget_tolerance_percent,
            )
        )

    # ---------- carga ----------

    def load_profiles(self, organization_id: str) -> list[RequirementProfile]:
        rows = self.client_repo.get_active(organization_id, self.settings.client_statuses)
        return [RequirementProfile.from_db_row(row) for row in rows]

    def load_listings(self, organization_id: str) -> list[CandidateListing]:
        rows = self.property_repo.get_active(
            organization_id, self.settings.property_statuses
        )
        return [CandidateListing.from_db_row(row) for row in rows]

    def load_profile(self, organization_id: str, client_id: str) -> RequirementProfile:
        """
        Perfil de un cliente con sus notas y últimos comentarios.

        Raises:
            LookupError: Si el cliente no existe en la organización
        """
        row = self.client_repo.get_by_id(organization_id, client_id)
        if row is None:
            raise LookupError(f"Cliente {client_id} no encontrado")

        profile = RequirementProfile.from_db_row(row)
        comments = self.client_repo.get_comments(organization_id, client_id)
        notes = NOTES_SEPARATOR.join(filter(None, [profile.notes, *comments]))
        return profile.model_copy(update={"notes": notes or None})

    def load_listing(self, organization_id: str, property_id: str) -> CandidateListing:
        """
        Raises:
            LookupError: Si la propiedad no existe en la organización
        """
        row = self.property_repo.get_by_id(organization_id, property_id)
        if row is None:
            raise LookupError(f"Propiedad {property_id} no encontrada")
        return CandidateListing.from_db_row(row)

    # ---------- rankings ----------

    def _options(self, min_score: Optional[float], limit: Optional[int]):
        if min_score is None:
            min_score = self.settings.default_min_score
        if limit is None:
            limit = self.settings.default_result_limit
        return min_score, limit

    def matches_for_client(
        self,
        organization_id: str,
        client_id: str,
        min_score: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> list[MatchResult]:
        """
        Mejores propiedades para un cliente.

        Args:
            organization_id: Tenant
            client_id: UUID del cliente
            min_score: Score mínimo (default de settings)
            limit: Máximo de resultados (default de settings)

        Returns:
            Lista de MatchResult ordenada
        """
        min_score, limit = self._options(min_score, limit)
        profile = self.load_profile(organization_id, client_id)
        listings = self.load_listings(organization_id)

        results = self.assembler.find_matching_properties(
            profile, listings, min_score=min_score, limit=limit
        )
        logger.info(
            "Matches para cliente",
            client_id=client_id,
            candidates=len(listings),
            matches=len(results),
        )
        return results

    def matches_for_property(
        self,
        organization_id: str,
        property_id: str,
        min_score: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> list[MatchResult]:
        """Mejores clientes para una propiedad."""
        min_score, limit = self._options(min_score, limit)
        listing = self.load_listing(organization_id, property_id)
        profiles = self.load_profiles(organization_id)

        results = self.assembler.find_matching_clients(
            listing, profiles, min_score=min_score, limit=limit
        )
        logger.info(
            "Matches para propiedad",
            property_id=property_id,
            candidates=len(profiles),
            matches=len(results),
        )
        return results

    # ---------- dashboard ----------

    def analytics(self, organization_id: str) -> MatchAnalytics:
        """Evalúa todos los pares de la organización y arma el dashboard."""
        profiles = self.load_profiles(organization_id)
        listings = self.load_listings(organization_id)

        results = self.assembler.score_all(profiles, listings)
        analytics = build_match_analytics(
            results,
            profiles,
            listings,
            fair_threshold=self.settings.fair_match_threshold,
        )
        logger.info(
            "Analytics calculados",
            organization_id=organization_id,
            clients=len(profiles),
            properties=len(listings),
            pairs=len(results),
        )
        return analytics

    def summary(self, organization_id: str) -> MatchSummaryStats:
        return summary_stats(self.analytics(organization_id))
