"""
Analytics del dashboard de matchmaking.

Agrega un batch de MatchResult (todos los pares de una organización)
en distribución de scores, mejores matches, clientes sin buenas
opciones y propiedades con más interés.
"""

import math
from typing import Iterable, Optional

from estatematch.matching.ranking import sort_results
from estatematch.models import (
    CandidateListing,
    ClientMatchSummary,
    MatchAnalytics,
    MatchDistributionBucket,
    MatchResult,
    MatchSummaryStats,
    PropertyMatchStats,
    RequirementProfile,
)

DISTRIBUTION_RANGES: tuple[tuple[int, int], ...] = (
    (0, 25),
    (26, 50),
    (51, 70),
    (71, 85),
    (86, 100),
)

TOP_MATCHES_LIMIT = 20
UNMATCHED_CLIENTS_LIMIT = 10
HOT_PROPERTIES_LIMIT = 10


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def match_distribution(results: Iterable[MatchResult]) -> list[MatchDistributionBucket]:
    buckets = [
        MatchDistributionBucket(range=f"{low}-{high}%", min=low, max=high)
        for low, high in DISTRIBUTION_RANGES
    ]
    for result in results:
        for bucket in buckets:
            if bucket.min <= result.overall_score <= bucket.max:
                bucket.count += 1
                break
    return buckets


def build_match_analytics(
    results: list[MatchResult],
    profiles: list[RequirementProfile],
    listings: list[CandidateListing],
    fair_threshold: float = 50.0,
) -> MatchAnalytics:
    """
    Calcula los datos del dashboard.

    Args:
        results: Todos los pares evaluados (sin filtrar)
        profiles: Clientes que participaron del batch
        listings: Propiedades que participaron del batch
        fair_threshold: Score desde el cual un match cuenta como aceptable

    Returns:
        MatchAnalytics
    """
    if not profiles or not listings:
        return MatchAnalytics(
            match_distribution=match_distribution([]),
            total_clients=len(profiles),
            total_properties=len(listings),
        )

    fair = [r for r in results if r.overall_score >= fair_threshold]

    # Mejor score por cliente
    best_by_client: dict[Optional[str], int] = {}
    for result in results:
        current = best_by_client.get(result.client_id, 0)
        best_by_client[result.client_id] = max(current, result.overall_score)

    unmatched = [
        ClientMatchSummary(
            id=p.id,
            name=p.name,
            best_match_score=best_by_client.get(p.id, 0),
        )
        for p in profiles
        if best_by_client.get(p.id, 0) < fair_threshold
    ]
    unmatched.sort(key=lambda c: c.best_match_score)

    # Interés por propiedad (solo matches aceptables)
    stats_by_property: dict[Optional[str], list[int]] = {}
    for result in fair:
        stats_by_property.setdefault(result.property_id, []).append(result.overall_score)

    hot = []
    for listing in listings:
        scores = stats_by_property.get(listing.id)
        if not scores:
            continue
        hot.append(
            PropertyMatchStats(
                id=listing.id,
                name=listing.name,
                match_count=len(scores),
                average_match_score=_round_half_up(sum(scores) / len(scores)),
                top_match_score=max(scores),
            )
        )
    hot.sort(key=lambda p: -p.match_count)

    average = (
        _round_half_up(sum(r.overall_score for r in results) / len(results))
        if results
        else 0
    )

    return MatchAnalytics(
        top_matches=sort_results(fair)[:TOP_MATCHES_LIMIT],
        match_distribution=match_distribution(results),
        unmatched_clients=unmatched[:UNMATCHED_CLIENTS_LIMIT],
        hot_properties=hot[:HOT_PROPERTIES_LIMIT],
        total_clients=len(profiles),
        total_properties=len(listings),
        average_match_score=average,
        clients_with_matches=len({r.client_id for r in fair}),
    )


def summary_stats(analytics: MatchAnalytics) -> MatchSummaryStats:
    """Resumen para el widget del dashboard."""
    return MatchSummaryStats(
        total_clients=analytics.total_clients,
        total_properties=analytics.total_properties,
        matches_above_50=sum(
            b.count for b in analytics.match_distribution if b.min >= 51
        ),
        matches_above_80=sum(
            b.count for b in analytics.match_distribution if b.min >= 71
        ),
        average_score=analytics.average_match_score,
    )
