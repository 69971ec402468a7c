"""
Modelos de datos del sistema.

- Entrada: RequirementProfile (cliente) y CandidateListing (propiedad)
- Salida: MatchResult y analytics del dashboard
"""

from estatematch.models.requirement import (
    RequirementProfile,
    ExtractedPreference,
    PreferenceType,
    Importance,
    Intent,
)
from estatematch.models.listing import CandidateListing
from estatematch.models.match_result import MatchResult, CriterionScore, CriterionKind
from estatematch.models.analytics import (
    MatchAnalytics,
    MatchDistributionBucket,
    MatchSummaryStats,
    ClientMatchSummary,
    PropertyMatchStats,
)

__all__ = [
    # Entrada
    "RequirementProfile",
    "ExtractedPreference",
    "PreferenceType",
    "Importance",
    "Intent",
    "CandidateListing",
    # Salida
    "MatchResult",
    "CriterionScore",
    "CriterionKind",
    # Dashboard
    "MatchAnalytics",
    "MatchDistributionBucket",
    "MatchSummaryStats",
    "ClientMatchSummary",
    "PropertyMatchStats",
]
