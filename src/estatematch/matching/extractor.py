"""
Extracción de preferencias a partir de notas en texto libre.

Deteccion por keywords (inglés + griego) con indicadores de importancia
y de negación evaluados por cláusula.
"""

from typing import Iterable, Optional

import structlog

from estatematch.matching.patterns import DEFAULT_PATTERNS, PatternTable, normalize_text
from estatematch.models import ExtractedPreference, Importance, PreferenceType

logger = structlog.get_logger()


class PreferenceExtractor:
    """
    Convierte notas del cliente en un set deduplicado de ExtractedPreference.

    Flujo:
    1. Normalizar texto y separar en oraciones (descartando las de < 5 chars)
    2. Separar cada oración en cláusulas (comas, "and", "και", ...)
    3. Por cláusula: tipos detectados, importancia y polaridad
    4. Deduplicar por tipo quedándose con la mayor importancia

    Nunca lanza excepciones: texto vacío o basura devuelve [].
    """

    def __init__(self, patterns: Optional[PatternTable] = None):
        self.patterns = patterns or DEFAULT_PATTERNS

    def extract(self, text: Optional[str]) -> list[ExtractedPreference]:
        """
        Extrae preferencias de un bloque de texto.

        Args:
            text: Notas libres (puede ser None o vacío)

        Returns:
            Lista de preferencias, una por tipo, en orden de aparición
        """
        if not isinstance(text, str) or not text.strip():
            return []

        normalized = normalize_text(text)
        found: list[ExtractedPreference] = []

        for sentence in self.patterns.split_sentences(normalized):
            # La importancia declarada en una cláusula se arrastra a las
            # siguientes de la misma oración hasta que aparezca otra
            carried: Optional[Importance] = None
            # La negación también se arrastra ("no pool, garden or balcony")
            # y se corta con "but"/"αλλά" o con un indicador de importancia
            negated = False

            for clause, contrast in self.patterns.clause_segments(sentence):
                clause_importance = self._importance_of(clause)
                if contrast or clause_importance is not None:
                    negated = False
                if clause_importance is not None:
                    carried = clause_importance
                if self.patterns.is_negated(clause):
                    negated = True

                types = self.patterns.matching_types(clause)
                if not types:
                    continue

                value = not negated
                for pref_type in types:
                    found.append(
                        ExtractedPreference(
                            type=pref_type,
                            value=value,
                            importance=carried or Importance.NICE_TO_HAVE,
                            source_text=clause,
                        )
                    )

        preferences = deduplicate(found)
        logger.debug(
            "Preferencias extraídas",
            text_length=len(text),
            candidates=len(found),
            extracted=len(preferences),
        )
        return preferences

    def _importance_of(self, clause: str) -> Optional[Importance]:
        """Indicador explícito de la cláusula; required tiene prioridad."""
        if self.patterns.is_required(clause):
            return Importance.REQUIRED
        if self.patterns.is_preferred(clause):
            return Importance.PREFERRED
        return None


def deduplicate(
    preferences: Iterable[ExtractedPreference],
) -> list[ExtractedPreference]:
    """
    Una entrada por tipo: gana la de mayor importancia; en empate, la primera.

    El resultado conserva la posición de la primera aparición de cada tipo.
    """
    by_type: dict[PreferenceType, ExtractedPreference] = {}
    for pref in preferences:
        current = by_type.get(pref.type)
        if current is None or pref.importance.rank > current.importance.rank:
            by_type[pref.type] = pref
    return list(by_type.values())


def merge_preferences(
    supplied: Iterable[ExtractedPreference],
    extracted: Iterable[ExtractedPreference],
) -> list[ExtractedPreference]:
    """Preferencias provistas primero, luego las extraídas, deduplicadas."""
    return deduplicate([*supplied, *extracted])
