"""
Armado de rankings sobre muchos pares cliente x propiedad.
"""

from typing import Iterable, Optional, Union

import structlog
from pydantic import BaseModel, Field

from estatematch.matching.scorer import MatchScorer
from estatematch.models import CandidateListing, MatchResult, RequirementProfile

logger = structlog.get_logger()

Profiles = Union[RequirementProfile, Iterable[RequirementProfile]]
Listings = Union[CandidateListing, Iterable[CandidateListing]]


class RankingOptions(BaseModel):
    """
    Parámetros de un ranking.

    Se validan antes de calcular cualquier score: un threshold negativo o
    un limit no entero es un error de quien llama.
    """

    min_score: float = Field(0.0, ge=0.0, le=100.0, allow_inf_nan=False)
    limit: Optional[int] = Field(None, ge=1, strict=True)


def _as_list(items, model) -> list:
    if isinstance(items, model):
        return [items]
    return list(items or [])


def sort_results(results: Iterable[MatchResult]) -> list[MatchResult]:
    """
    Score descendente, luego cantidad de criterios cumplidos descendente.
    El sort es estable: los empates quedan en orden de entrada.
    """
    return sorted(results, key=lambda r: (-r.overall_score, -r.matched_criteria))


class RankingAssembler:
    """
    Calcula MatchResult para cada par del set candidato, filtra por
    threshold, ordena y trunca.

    No filtra por organización: el caller debe pasar solo candidatos del
    mismo tenant.
    """

    def __init__(self, scorer: Optional[MatchScorer] = None):
        self.scorer = scorer or MatchScorer()

    def score_all(self, profiles: Profiles, listings: Listings) -> list[MatchResult]:
        """
        Todos los pares, sin filtrar ni ordenar (orden perfil -> propiedad).
        """
        profile_list = _as_list(profiles, RequirementProfile)
        listing_list = _as_list(listings, CandidateListing)

        # Normalizar una sola vez por lado
        requirements = [self.scorer.prepare_requirement(p) for p in profile_list]
        normalized_listings = [self.scorer.prepare_listing(l) for l in listing_list]

        return [
            self.scorer.score_normalized(req, lst)
            for req in requirements
            for lst in normalized_listings
        ]

    def rank(
        self,
        profiles: Profiles,
        listings: Listings,
        min_score: float = 0.0,
        limit: Optional[int] = None,
    ) -> list[MatchResult]:
        """
        Ranking de pares.

        Args:
            profiles: Uno o varios perfiles de cliente
            listings: Una o varias propiedades
            min_score: Score mínimo (0 = sin filtro)
            limit: Máximo de resultados (None = todos)

        Returns:
            Lista de MatchResult ordenada

        Raises:
            pydantic.ValidationError: Si min_score o limit son inválidos
        """
        options = RankingOptions(min_score=min_score, limit=limit)

        results = self.score_all(profiles, listings)
        kept = [r for r in results if r.overall_score >= options.min_score]
        ranked = sort_results(kept)
        if options.limit is not None:
            ranked = ranked[: options.limit]

        logger.debug(
            "Ranking calculado",
            pairs=len(results),
            above_threshold=len(kept),
            returned=len(ranked),
        )
        return ranked

    def find_matching_properties(
        self,
        profile: RequirementProfile,
        listings: Iterable[CandidateListing],
        min_score: float = 0.0,
        limit: Optional[int] = None,
    ) -> list[MatchResult]:
        """Mejores propiedades para un cliente."""
        return self.rank(profile, listings, min_score=min_score, limit=limit)

    def find_matching_clients(
        self,
        listing: CandidateListing,
        profiles: Iterable[RequirementProfile],
        min_score: float = 0.0,
        limit: Optional[int] = None,
    ) -> list[MatchResult]:
        """Mejores clientes para una propiedad."""
        return self.rank(profiles, listing, min_score=min_score, limit=limit)
