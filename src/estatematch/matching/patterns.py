"""
Tablas de patrones para detectar preferencias en texto libre.

Los patrones se aplican sobre texto normalizado (minúsculas, sin acentos),
por eso las variantes griegas están escritas sin tonos: "ντους", "ασανσερ".
Cada concepto tiene al menos una variante en inglés y una en griego.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from estatematch.models import PreferenceType

FEATURE_PATTERNS: dict[PreferenceType, tuple[str, ...]] = {
    PreferenceType.ELEVATOR: (
        r"\belevators?\b",
        r"\blifts?\b",
        r"\bασανσερ\b",
        r"\bανελκυστηρ\w*",
    ),
    PreferenceType.GROUND_FLOOR: (
        r"\bground[- ]floor\b",
        r"\bισογει\w*",
    ),
    PreferenceType.BALCONY: (
        r"\bbalcon(?:y|ies)\b",
        r"\bverandas?\b",
        r"\bμπαλκον\w*",
        r"\bβεραντ\w*",
    ),
    PreferenceType.SEA_VIEW: (
        r"\bsea[- ]?views?\b",
        r"\bviews? (?:of|to) the sea\b",
        r"\bθεα\b.{0,15}\bθαλασσ\w*",
        r"\bθαλασσιν\w* θεα\b",
    ),
    PreferenceType.RENOVATED: (
        r"\brenovated\b",
        r"\brefurbished\b",
        r"\bανακαινισμεν\w*",
    ),
    PreferenceType.NEW_BUILD: (
        r"\bnew[- ]build\b",
        r"\bnewly built\b",
        r"\bnew construction\b",
        r"\bνεοδμητ\w*",
        r"\bκαινουργι\w*",
    ),
    PreferenceType.QUIET: (
        r"\bquiet\b",
        r"\bpeaceful\b",
        r"\bησυχ\w*",
    ),
    PreferenceType.BRIGHT: (
        r"\bbright\b",
        r"\bsunny\b",
        r"\bnatural light\b",
        r"\bφωτειν\w*",
        r"\bηλιολουστ\w*",
    ),
    PreferenceType.PARKING: (
        r"\bparking\b",
        r"\bgarages?\b",
        r"\bπαρκινγκ\b",
        r"\bθεση σταθμευσης\b",
        r"\bγκαραζ\b",
        r"\bπυλωτ\w*",
    ),
    PreferenceType.PET_FRIENDLY: (
        r"\bpet[- ]friendly\b",
        r"\bpets? (?:are )?(?:allowed|welcome|ok)\b",
        r"\b(?:allows|accepts) pets\b",
        r"\bκατοικιδια (?:επιτρεπονται|ευπροσδεκτα)\b",
        r"\bδεκτα (?:τα )?κατοικιδια\b",
    ),
    PreferenceType.GARDEN: (
        r"\bgardens?\b",
        r"\byard\b",
        r"\bκηπ\w*",
    ),
    PreferenceType.POOL: (
        r"\b(?:swimming )?pools?\b",
        r"\bπισιν\w*",
    ),
    PreferenceType.STORAGE: (
        r"\bstorage(?: room)?\b",
        r"\bαποθηκ\w*",
    ),
    PreferenceType.FIREPLACE: (
        r"\bfireplaces?\b",
        r"\bτζακι\b",
    ),
    PreferenceType.AIR_CONDITIONING: (
        r"\bair[- ]?condition\w*",
        r"\ba/c\b",
        r"\bκλιματισ\w*",
    ),
    PreferenceType.FURNISHED: (
        r"\bfurnished\b",
        r"\bεπιπλωμεν\w*",
    ),
    PreferenceType.SHOWER: (
        r"\bshowers?\b",
        r"\bντους\b",
    ),
    PreferenceType.MODERN_KITCHEN: (
        r"\bmodern kitchen\b",
        r"\bnew kitchen\b",
        r"\bμοντερν\w* κουζιν\w*",
        r"\bσυγχρον\w* κουζιν\w*",
    ),
}

# Substrings a buscar en los amenities serializados de la propiedad.
# Los tipos ausentes usan su propio nombre en minúsculas.
AMENITY_KEYWORDS: dict[PreferenceType, tuple[str, ...]] = {
    PreferenceType.BALCONY: ("balcon", "veranda"),
    PreferenceType.SEA_VIEW: ("sea_view", "seaview", "sea view"),
    PreferenceType.BRIGHT: ("bright", "sunny"),
    PreferenceType.PARKING: ("parking", "garage"),
    PreferenceType.PET_FRIENDLY: ("pet_friendly", "petfriendly", "pets", "accepts_pets"),
    PreferenceType.GARDEN: ("garden", "yard"),
    PreferenceType.AIR_CONDITIONING: ("air_condition", "aircondition", "a/c", "climat"),
    PreferenceType.FURNISHED: ("furnish",),
    PreferenceType.MODERN_KITCHEN: ("modern_kitchen", "modern kitchen"),
}

REQUIRED_INDICATORS: tuple[str, ...] = (
    r"\bmust\b",
    r"\bneeds?\b",
    r"\bneeded\b",
    r"\brequire[sd]?\b",
    r"\brequirement\b",
    r"\bessential\b",
    r"\bmandatory\b",
    r"\bπρεπει\b",
    r"\bαπαραιτητ\w*",
    r"\bχρειαζ\w*",
    r"\bυποχρεωτικ\w*",
    r"\bοπωσδηποτε\b",
)

PREFERRED_INDICATORS: tuple[str, ...] = (
    r"\bprefers?\b",
    r"\bpreferably\b",
    r"\bpreferred\b",
    r"\bwants?\b",
    r"\bwould like\b",
    r"\bideally\b",
    r"\bπροτιμ\w*",
    r"\bθελ\w*",
    r"\bθα ηθελε\b",
    r"\bιδανικα\b",
)

NEGATIVE_INDICATORS: tuple[str, ...] = (
    r"\bno\b",
    r"\bnot\b",
    r"\bdon't\b",
    r"\bdoesn't\b",
    r"\bavoid\w*",
    r"\bwithout\b",
    r"\bοχι\b",
    r"\bδεν\b",
    r"\bχωρις\b",
    r"\bμην?\b",
    r"\bαποφυγ\w*",
)

SENTENCE_SPLIT = r"[.!?\n]+"
CLAUSE_SPLIT = r"[,;]|\band\b|\bbut\b|\bκαι\b|\bαλλα\b"
CONTRAST_WORDS = r"but|αλλα"
MIN_SEGMENT_LENGTH = 5


def normalize_text(text: Optional[str]) -> str:
    """
    Minúsculas, sin acentos (también tonos griegos) y espacios colapsados.

    Conserva los saltos de línea porque separan oraciones.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text))
    stripped = "".join(c for c in decomposed if unicodedata.category(c) != "Mn")
    stripped = stripped.replace("’", "'").replace("‘", "'")
    stripped = re.sub(r"[ \t\r\f\v]+", " ", stripped)
    return stripped.lower().strip()


def _compile_all(patterns) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p, flags=re.IGNORECASE) for p in patterns)


@dataclass(frozen=True)
class PatternTable:
    """
    Configuración inmutable de patrones.

    Se construye una vez y se comparte entre extractor y scorer. Para tests
    se puede armar una tabla reducida con solo los tipos que interesan.
    """

    feature_patterns: Mapping[PreferenceType, tuple[str, ...]] = field(
        default_factory=lambda: FEATURE_PATTERNS
    )
    amenity_keywords: Mapping[PreferenceType, tuple[str, ...]] = field(
        default_factory=lambda: AMENITY_KEYWORDS
    )
    required_indicators: tuple[str, ...] = REQUIRED_INDICATORS
    preferred_indicators: tuple[str, ...] = PREFERRED_INDICATORS
    negative_indicators: tuple[str, ...] = NEGATIVE_INDICATORS
    sentence_split: str = SENTENCE_SPLIT
    clause_split: str = CLAUSE_SPLIT
    contrast_words: str = CONTRAST_WORDS
    min_segment_length: int = MIN_SEGMENT_LENGTH

    def __post_init__(self):
        # Congelar los mappings y precompilar una sola vez
        feature_patterns = {
            PreferenceType(k): tuple(v) for k, v in self.feature_patterns.items()
        }
        amenity_keywords = {
            PreferenceType(k): tuple(s.lower() for s in v)
            for k, v in self.amenity_keywords.items()
        }
        object.__setattr__(self, "feature_patterns", MappingProxyType(feature_patterns))
        object.__setattr__(self, "amenity_keywords", MappingProxyType(amenity_keywords))
        object.__setattr__(
            self,
            "_compiled_features",
            MappingProxyType({k: _compile_all(v) for k, v in feature_patterns.items()}),
        )
        object.__setattr__(self, "_required", _compile_all(self.required_indicators))
        object.__setattr__(self, "_preferred", _compile_all(self.preferred_indicators))
        object.__setattr__(self, "_negative", _compile_all(self.negative_indicators))
        object.__setattr__(self, "_sentence_re", re.compile(self.sentence_split))
        object.__setattr__(self, "_clause_re", re.compile(self.clause_split))
        object.__setattr__(self, "_clause_capture_re", re.compile(f"({self.clause_split})"))
        object.__setattr__(self, "_contrast_re", re.compile(self.contrast_words))

    @property
    def types(self) -> tuple[PreferenceType, ...]:
        """Tipos de preferencia que esta tabla sabe detectar."""
        return tuple(self.feature_patterns.keys())

    def split_sentences(self, normalized: str) -> list[str]:
        return [
            s.strip()
            for s in self._sentence_re.split(normalized)
            if len(s.strip()) >= self.min_segment_length
        ]

    def split_clauses(self, sentence: str) -> list[str]:
        return [c.strip() for c in self._clause_re.split(sentence) if c.strip()]

    def clause_segments(self, sentence: str) -> list[tuple[str, bool]]:
        """
        Cláusulas de la oración, cada una con un flag que indica si la
        precede una conjunción adversativa ("but", "αλλά").
        """
        segments: list[tuple[str, bool]] = []
        contrast = False
        # split con grupo de captura: posiciones impares son delimitadores
        for i, part in enumerate(self._clause_capture_re.split(sentence)):
            if i % 2:
                contrast = contrast or bool(self._contrast_re.fullmatch(part.strip()))
            elif part.strip():
                segments.append((part.strip(), contrast))
                contrast = False
        return segments

    def matching_types(self, segment: str) -> list[PreferenceType]:
        """Tipos cuyo algún patrón aparece en el segmento, en orden de tabla."""
        return [
            pref_type
            for pref_type, patterns in self._compiled_features.items()
            if any(p.search(segment) for p in patterns)
        ]

    def mentions(self, pref_type: PreferenceType, text: str) -> bool:
        """True si algún patrón del tipo aparece en el texto (ya normalizado)."""
        patterns = self._compiled_features.get(pref_type, ())
        return any(p.search(text) for p in patterns)

    def amenity_terms(self, pref_type: PreferenceType) -> tuple[str, ...]:
        return self.amenity_keywords.get(pref_type) or (pref_type.value.lower(),)

    def is_required(self, segment: str) -> bool:
        return any(p.search(segment) for p in self._required)

    def is_preferred(self, segment: str) -> bool:
        return any(p.search(segment) for p in self._preferred)

    def is_negated(self, segment: str) -> bool:
        return any(p.search(segment) for p in self._negative)


DEFAULT_PATTERNS = PatternTable()
