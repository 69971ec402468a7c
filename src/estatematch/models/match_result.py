"""
Resultado de Matching

Salida de evaluar un par (perfil, propiedad): score global 0-100
más el desglose por criterio que lo explica.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CriterionKind(str, Enum):
    """Origen del criterio evaluado."""

    HARD = "hard"  # Campo estructurado (presupuesto, zona, tipo, ...)
    SOFT = "soft"  # Preferencia inferida de texto libre


class CriterionScore(BaseModel):
    """Una línea del desglose."""

    model_config = ConfigDict(frozen=True)

    criterion: str = Field(..., description="budget, location, ... o el tipo de preferencia")
    kind: CriterionKind
    matched: bool
    weight: int = Field(..., ge=0)
    contribution: int = Field(..., ge=0, description="weight si matched, 0 si no")
    reason: str = Field(default="", description="Explicación legible")


class MatchResult(BaseModel):
    """
    Score de compatibilidad entre un cliente y una propiedad.

    overall_score = round(100 * sum(contribution) / sum(weight)); si no se
    evaluó ningún criterio el score es 100 (match vacuo). Quien llama debe
    tratar aparte un perfil sin ninguna señal si no quiere ese resultado.
    """

    model_config = ConfigDict(frozen=True)

    client_id: Optional[str] = None
    property_id: Optional[str] = None
    overall_score: int = Field(..., ge=0, le=100)
    breakdown: list[CriterionScore] = Field(default_factory=list)
    matched_criteria: int = Field(..., ge=0)
    total_criteria: int = Field(..., ge=0)
    calculated_at: str = Field(
        default_factory=lambda: datetime.utcnow().isoformat(),
        description="Timestamp del cálculo",
    )

    @property
    def is_vacuous(self) -> bool:
        """True si no hubo ningún criterio evaluable."""
        return self.total_criteria == 0
