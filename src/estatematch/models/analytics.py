"""
Modelos del dashboard de matchmaking.
"""

from typing import Optional

from pydantic import BaseModel, Field

from estatematch.models.match_result import MatchResult


class MatchDistributionBucket(BaseModel):
    """Rango de scores con la cantidad de matches que caen en él."""

    range: str = Field(..., description="Ej: '0-25%'")
    min: int
    max: int
    count: int = 0


class ClientMatchSummary(BaseModel):
    """Cliente con su mejor score, para la lista de 'sin buenos matches'."""

    id: Optional[str] = None
    name: Optional[str] = None
    best_match_score: int = 0


class PropertyMatchStats(BaseModel):
    """Propiedad con estadísticas de interés."""

    id: Optional[str] = None
    name: Optional[str] = None
    match_count: int = 0
    average_match_score: int = 0
    top_match_score: int = 0


class MatchAnalytics(BaseModel):
    """Datos completos del dashboard."""

    top_matches: list[MatchResult] = Field(default_factory=list)
    match_distribution: list[MatchDistributionBucket] = Field(default_factory=list)
    unmatched_clients: list[ClientMatchSummary] = Field(default_factory=list)
    hot_properties: list[PropertyMatchStats] = Field(default_factory=list)
    total_clients: int = 0
    total_properties: int = 0
    average_match_score: int = 0
    clients_with_matches: int = 0


class MatchSummaryStats(BaseModel):
    """Resumen rápido para widgets."""

    total_clients: int = 0
    total_properties: int = 0
    matches_above_50: int = 0
    matches_above_80: int = 0
    average_score: int = 0
