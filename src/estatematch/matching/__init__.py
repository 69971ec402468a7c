"""
Motor de matching.

Extrae preferencias de las notas del cliente, normaliza ambos lados,
calcula scores explicables y arma rankings y analytics.
"""

from estatematch.matching.patterns import PatternTable, DEFAULT_PATTERNS
from estatematch.matching.extractor import PreferenceExtractor
from estatematch.matching.normalizers import CriteriaNormalizer, ConditionTier
from estatematch.matching.scorer import MatchScorer, ScoringWeights
from estatematch.matching.ranking import RankingAssembler, RankingOptions
from estatematch.matching.analytics import build_match_analytics, summary_stats
from estatematch.matching.engine import MatchingEngine

__all__ = [
    "PatternTable",
    "DEFAULT_PATTERNS",
    "PreferenceExtractor",
    "CriteriaNormalizer",
    "ConditionTier",
    "MatchScorer",
    "ScoringWeights",
    "RankingAssembler",
    "RankingOptions",
    "build_match_analytics",
    "summary_stats",
    "MatchingEngine",
]
