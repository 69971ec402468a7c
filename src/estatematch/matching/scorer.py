"""
Scorer de compatibilidad cliente-propiedad.

Implementa:
- Criterios hard: presupuesto, zona, tipo, dormitorios, baños,
  operación (intent vs tipo de transacción), superficie y estado
- Criterios soft: una evaluación por preferencia, despachada por tipo
- Score = suma ponderada de criterios cumplidos sobre suma de pesos

Un criterio que no se puede evaluar (falta el dato de un lado) no suma
ni al numerador ni al denominador.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from estatematch.matching.extractor import PreferenceExtractor, merge_preferences
from estatematch.matching.normalizers import (
    ConditionTier,
    CriteriaNormalizer,
    NormalizedListing,
    NormalizedRequirement,
)
from estatematch.matching.patterns import DEFAULT_PATTERNS, PatternTable
from estatematch.models import (
    CandidateListing,
    CriterionKind,
    CriterionScore,
    ExtractedPreference,
    Importance,
    MatchResult,
    PreferenceType,
    RequirementProfile,
)

# (matched, reason) o None si el criterio no es evaluable
Evaluation = Optional[tuple[bool, str]]


@dataclass(frozen=True)
class ScoringWeights:
    """Pesos por criterio. Inmutables una vez construidos."""

    hard: int = 3
    required: int = 3
    preferred: int = 2
    nice_to_have: int = 1

    def for_importance(self, importance: Importance) -> int:
        if importance is Importance.REQUIRED:
            return self.required
        if importance is Importance.PREFERRED:
            return self.preferred
        return self.nice_to_have


DEFAULT_WEIGHTS = ScoringWeights()


def _in_range(value: float, low: Optional[float], high: Optional[float]) -> bool:
    return (low is None or value >= low) and (high is None or value <= high)


def _range_label(low, high) -> str:
    if low is not None and high is not None:
        return f"{low:g}-{high:g}"
    if low is not None:
        return f">= {low:g}"
    return f"<= {high:g}"


# ============================================
# CRITERIOS HARD
# ============================================


def _count_criterion(label: str, value, low, high) -> Evaluation:
    if low is None and high is None:
        return None
    if value is None:
        return None
    matched = _in_range(value, low, high)
    return matched, f"{value} {label} (pedido {_range_label(low, high)})"


def score_location(req: NormalizedRequirement, lst: NormalizedListing) -> Evaluation:
    if not req.locations or not lst.locations:
        return None
    common = req.locations & lst.locations
    if common:
        return True, f"Zona: {sorted(common)[0]}"
    return False, "Zona fuera de las de interés"


def score_property_type(req: NormalizedRequirement, lst: NormalizedListing) -> Evaluation:
    if not req.property_types or not lst.property_type:
        return None
    matched = lst.property_type in req.property_types
    return matched, f"Tipo: {lst.property_type}"


def score_bedrooms(req: NormalizedRequirement, lst: NormalizedListing) -> Evaluation:
    return _count_criterion("dormitorios", lst.bedrooms, req.bedrooms_min, req.bedrooms_max)


def score_bathrooms(req: NormalizedRequirement, lst: NormalizedListing) -> Evaluation:
    return _count_criterion("baños", lst.bathrooms, req.bathrooms_min, req.bathrooms_max)


def score_transaction(req: NormalizedRequirement, lst: NormalizedListing) -> Evaluation:
    if not req.transactions or not lst.transaction_type:
        return None
    matched = lst.transaction_type in req.transactions
    return matched, f"Operación: {lst.transaction_type}"


def score_size(req: NormalizedRequirement, lst: NormalizedListing) -> Evaluation:
    return _count_criterion("m²", lst.size_sqm, req.size_min_sqm, req.size_max_sqm)


def score_condition(req: NormalizedRequirement, lst: NormalizedListing) -> Evaluation:
    if not req.conditions or lst.condition is None:
        return None
    matched = lst.condition in req.conditions
    return matched, f"Estado: {lst.condition.name.lower()}"


# ============================================
# SCORER
# ============================================


class MatchScorer:
    """
    Evalúa un par perfil/propiedad y produce un MatchResult.

    Pesos y patrones se inyectan en la construcción; los defaults se
    comparten entre instancias porque son inmutables.
    """

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        patterns: Optional[PatternTable] = None,
        normalizer: Optional[CriteriaNormalizer] = None,
        extractor: Optional[PreferenceExtractor] = None,
        budget_tolerance_percent: float = 0.0,
    ):
        self.weights = weights or DEFAULT_WEIGHTS
        self.patterns = patterns or DEFAULT_PATTERNS
        self.normalizer = normalizer or CriteriaNormalizer()
        self.extractor = extractor or PreferenceExtractor(self.patterns)
        self.budget_tolerance_percent = budget_tolerance_percent

        self.hard_criteria: tuple[tuple[str, Callable[..., Evaluation]], ...] = (
            ("budget", self.score_budget),
            ("location", score_location),
            ("type", score_property_type),
            ("bedrooms", score_bedrooms),
            ("bathrooms", score_bathrooms),
            ("transaction", score_transaction),
            ("size", score_size),
            ("condition", score_condition),
        )

        self.soft_matchers: dict[PreferenceType, Callable[..., Evaluation]] = {
            PreferenceType.ELEVATOR: self._match_elevator,
            PreferenceType.GROUND_FLOOR: self._match_ground_floor,
            PreferenceType.RENOVATED: self._match_condition,
            PreferenceType.NEW_BUILD: self._match_condition,
            PreferenceType.BALCONY: self._match_text,
            PreferenceType.SEA_VIEW: self._match_text,
            PreferenceType.QUIET: self._match_text,
            PreferenceType.BRIGHT: self._match_text,
            PreferenceType.PARKING: self._match_text,
            PreferenceType.PET_FRIENDLY: self._match_pets,
            PreferenceType.GARDEN: self._match_text,
            PreferenceType.POOL: self._match_text,
            PreferenceType.STORAGE: self._match_text,
            PreferenceType.FIREPLACE: self._match_text,
            PreferenceType.AIR_CONDITIONING: self._match_text,
            PreferenceType.FURNISHED: self._match_furnished,
            PreferenceType.SHOWER: self._match_text,
            PreferenceType.MODERN_KITCHEN: self._match_text,
        }
        missing = set(PreferenceType) - set(self.soft_matchers)
        if missing:
            raise ValueError(
                f"Tipos de preferencia sin matcher: {sorted(t.value for t in missing)}"
            )

    # ---------- API pública ----------

    def prepare_requirement(self, profile: RequirementProfile) -> NormalizedRequirement:
        """
        Extrae preferencias de las notas, las combina con las provistas y
        normaliza el perfil. Se hace una vez por perfil.
        """
        extracted = self.extractor.extract(profile.notes)
        preferences = merge_preferences(profile.preferences, extracted)
        return self.normalizer.normalize_requirement(profile, tuple(preferences))

    def prepare_listing(self, listing: CandidateListing) -> NormalizedListing:
        return self.normalizer.normalize_listing(listing)

    def score(self, profile: RequirementProfile, listing: CandidateListing) -> MatchResult:
        """Score de un par sin preparar."""
        return self.score_normalized(
            self.prepare_requirement(profile), self.prepare_listing(listing)
        )

    def score_normalized(
        self, req: NormalizedRequirement, lst: NormalizedListing
    ) -> MatchResult:
        """
        Score de un par ya normalizado.

        El desglose lista primero los criterios hard (orden fijo) y después
        las preferencias en el orden en que fueron provistas/extraídas.
        """
        breakdown: list[CriterionScore] = []

        for name, evaluate in self.hard_criteria:
            evaluation = evaluate(req, lst)
            if evaluation is None:
                continue
            matched, reason = evaluation
            breakdown.append(
                self._criterion(name, CriterionKind.HARD, self.weights.hard, matched, reason)
            )

        for pref in req.preferences:
            evaluation = self.soft_matchers[pref.type](pref, lst)
            if evaluation is None:
                continue
            matched, reason = evaluation
            weight = self.weights.for_importance(pref.importance)
            breakdown.append(
                self._criterion(pref.type.value, CriterionKind.SOFT, weight, matched, reason)
            )

        numerator = sum(c.contribution for c in breakdown)
        denominator = sum(c.weight for c in breakdown)

        return MatchResult(
            client_id=req.id,
            property_id=lst.id,
            overall_score=overall_score(numerator, denominator),
            breakdown=breakdown,
            matched_criteria=sum(1 for c in breakdown if c.matched),
            total_criteria=len(breakdown),
        )

    # ---------- criterios ----------

    def score_budget(self, req: NormalizedRequirement, lst: NormalizedListing) -> Evaluation:
        if lst.price is None or not req.has_budget:
            return None
        tolerance = self.budget_tolerance_percent / 100
        low = req.budget_min * (1 - tolerance) if req.budget_min is not None else None
        high = req.budget_max * (1 + tolerance) if req.budget_max is not None else None
        matched = _in_range(lst.price, low, high)
        label = "dentro" if matched else "fuera"
        return matched, f"Precio {lst.price:g} {label} del presupuesto"

    def _match_elevator(self, pref: ExtractedPreference, lst: NormalizedListing) -> Evaluation:
        if lst.elevator is None:
            return None
        return lst.elevator == pref.value, f"Ascensor: {'sí' if lst.elevator else 'no'}"

    def _match_ground_floor(self, pref: ExtractedPreference, lst: NormalizedListing) -> Evaluation:
        if lst.floor is None:
            return None
        is_ground = lst.floor == 0
        return is_ground == pref.value, f"Piso {lst.floor:g}"

    def _match_condition(self, pref: ExtractedPreference, lst: NormalizedListing) -> Evaluation:
        # Ignora pref.value: un estado alto siempre cumple renovated/newBuild
        if lst.condition is None:
            return None
        matched = lst.condition >= ConditionTier.VERY_GOOD
        return matched, f"Estado: {lst.condition.name.lower()}"

    def _match_pets(self, pref: ExtractedPreference, lst: NormalizedListing) -> Evaluation:
        # Sin el dato estructurado se busca en amenities/descripción
        if lst.accepts_pets is None:
            return self._match_text(pref, lst)
        return lst.accepts_pets == pref.value, f"Mascotas: {'sí' if lst.accepts_pets else 'no'}"

    def _match_furnished(self, pref: ExtractedPreference, lst: NormalizedListing) -> Evaluation:
        if lst.furnished is None:
            return self._match_text(pref, lst)
        present = lst.furnished in {"fully", "partially"}
        return present == pref.value, f"Amoblado: {lst.furnished}"

    def _match_text(self, pref: ExtractedPreference, lst: NormalizedListing) -> Evaluation:
        if not lst.amenities and not lst.description:
            return None

        amenities_text = lst.amenities_text
        if any(term in amenities_text for term in self.patterns.amenity_terms(pref.type)):
            present, where = True, "amenities"
        elif self.patterns.mentions(pref.type, lst.description):
            present, where = True, "descripción"
        else:
            present, where = False, ""

        reason = f"{pref.type.value} en {where}" if present else f"Sin {pref.type.value}"
        return present == pref.value, reason

    @staticmethod
    def _criterion(
        name: str, kind: CriterionKind, weight: int, matched: bool, reason: str
    ) -> CriterionScore:
        return CriterionScore(
            criterion=name,
            kind=kind,
            matched=matched,
            weight=weight,
            contribution=weight if matched else 0,
            reason=reason,
        )


def overall_score(numerator: int, denominator: int) -> int:
    """
    round(100 * numerator / denominator) con redondeo half-up, acotado
    a [0, 100]. Sin criterios evaluados el score es 100.
    """
    if denominator <= 0:
        return 100
    score = (200 * numerator + denominator) // (2 * denominator)
    return max(0, min(100, score))
