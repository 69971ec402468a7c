"""
Normalización de criterios.

Lleva un RequirementProfile y un CandidateListing al mismo vocabulario
(presupuesto numérico en moneda base, zonas canónicas, amenities en
minúsculas, estado como tier ordinal) para que el scorer compare sin
conversiones de tipos.

Ninguna función de este módulo lanza excepciones por datos faltantes o
mal formados: el valor queda en None y el criterio no se evalúa.
"""

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping, Optional

from estatematch.config import DEFAULT_EXCHANGE_RATES
from estatematch.matching.patterns import normalize_text
from estatematch.models import (
    CandidateListing,
    ExtractedPreference,
    Intent,
    RequirementProfile,
)


class ConditionTier(IntEnum):
    """Escala ordinal del estado de conservación."""

    POOR = 0
    FAIR = 1
    GOOD = 2
    VERY_GOOD = 3
    EXCELLENT = 4


CONDITION_ALIASES: dict[str, ConditionTier] = {
    "excellent": ConditionTier.EXCELLENT,
    "new": ConditionTier.EXCELLENT,
    "brand_new": ConditionTier.EXCELLENT,
    "αριστη": ConditionTier.EXCELLENT,
    "αριστο": ConditionTier.EXCELLENT,
    "καινουργιο": ConditionTier.EXCELLENT,
    "very_good": ConditionTier.VERY_GOOD,
    "verygood": ConditionTier.VERY_GOOD,
    "renovated": ConditionTier.VERY_GOOD,
    "πολυ_καλη": ConditionTier.VERY_GOOD,
    "ανακαινισμενο": ConditionTier.VERY_GOOD,
    "good": ConditionTier.GOOD,
    "average": ConditionTier.GOOD,
    "καλη": ConditionTier.GOOD,
    "fair": ConditionTier.FAIR,
    "μετρια": ConditionTier.FAIR,
    "poor": ConditionTier.POOR,
    "bad": ConditionTier.POOR,
    "needs_renovation": ConditionTier.POOR,
    "needsrenovation": ConditionTier.POOR,
    "renovate": ConditionTier.POOR,
    "fixer": ConditionTier.POOR,
    "χρηζει_ανακαινισης": ConditionTier.POOR,
}

PROPERTY_TYPE_ALIASES: dict[str, str] = {
    "apartment": "apartment",
    "flat": "apartment",
    "apt": "apartment",
    "διαμερισμα": "apartment",
    "house": "house",
    "detached_house": "house",
    "μονοκατοικια": "house",
    "maisonette": "maisonette",
    "μεζονετα": "maisonette",
    "studio": "studio",
    "γκαρσονιερα": "studio",
    "villa": "villa",
    "βιλα": "villa",
    "land": "land",
    "plot": "land",
    "οικοπεδο": "land",
    "commercial": "commercial",
    "shop": "commercial",
    "store": "commercial",
    "καταστημα": "commercial",
    "office": "office",
    "γραφειο": "office",
    "parking": "parking",
    "warehouse": "warehouse",
    "αποθηκη": "warehouse",
}

TRANSACTION_ALIASES: dict[str, str] = {
    "sale": "sale",
    "sell": "sale",
    "for_sale": "sale",
    "πωληση": "sale",
    "rental": "rental",
    "rent": "rental",
    "lease": "rental",
    "for_rent": "rental",
    "ενοικιαση": "rental",
    "short_term": "short_term",
    "shortterm": "short_term",
    "exchange": "exchange",
    "αντιπαροχη": "exchange",
}

INTENT_TO_TRANSACTION: dict[Intent, frozenset[str]] = {
    Intent.BUY: frozenset({"sale"}),
    Intent.INVEST: frozenset({"sale"}),
    Intent.RENT: frozenset({"rental", "short_term"}),
}

FLOOR_ALIASES: dict[str, float] = {
    "ground": 0,
    "ground_floor": 0,
    "ισογειο": 0,
    "basement": -1,
    "υπογειο": -1,
    "mezzanine": 0.5,
    "ημιωροφος": 0.5,
    "penthouse": 99,
    "ρετιρε": 99,
}

FURNISHED_ALIASES: dict[str, str] = {
    "no": "no",
    "unfurnished": "no",
    "none": "no",
    "partially": "partially",
    "partial": "partially",
    "semi": "partially",
    "fully": "fully",
    "full": "fully",
    "yes": "fully",
    "furnished": "fully",
    "επιπλωμενο": "fully",
}

SQFT_TO_SQM = 0.092903

_LOCATION_PREFIX = re.compile(r"^(city of|municipality of|δημος|νομος)\s*")
_LOCATION_SUFFIX = re.compile(r"\s*(city|municipality|δημος)$")


def _key(value: Any) -> str:
    """Clave canónica: texto normalizado con espacios/guiones como '_'."""
    return re.sub(r"[\s\-]+", "_", normalize_text(str(value))) if value is not None else ""


def normalize_location(location: Optional[str]) -> str:
    """
    Normaliza una zona para comparar: sin acentos, minúsculas, sin
    prefijos/sufijos tipo "Municipality of" o "Δήμος".
    """
    if not location:
        return ""
    normalized = normalize_text(location)
    normalized = _LOCATION_PREFIX.sub("", normalized)
    normalized = _LOCATION_SUFFIX.sub("", normalized)
    return re.sub(r"\s+", " ", normalized).strip()


def normalize_locations(locations) -> frozenset[str]:
    return frozenset(filter(None, (normalize_location(loc) for loc in locations or ())))


def listing_locations(listing: CandidateListing) -> frozenset[str]:
    """Todos los identificadores de ubicación de la propiedad."""
    return normalize_locations(
        [listing.area, listing.city, listing.municipality, listing.state]
    )


def parse_floor(floor: Optional[str]) -> Optional[float]:
    """
    Convierte el piso a número.

    Soporta: "3", "-1", "ground", "ισόγειο", "basement", "penthouse", ...
    """
    if floor is None:
        return None
    key = _key(floor)
    if not key:
        return None
    if key in FLOOR_ALIASES:
        return float(FLOOR_ALIASES[key])
    try:
        return float(normalize_text(str(floor)).replace(",", "."))
    except ValueError:
        return None


def normalize_amenity_key(key: str) -> str:
    """"Air Conditioning" -> "air_conditioning"."""
    return re.sub(r"[^\w/]", "", _key(key))


def extract_amenities(amenities) -> frozenset[str]:
    """
    Set de amenities presentes.

    Formato dict: solo las claves con valor truthy. Formato lista: todos.
    """
    if not amenities:
        return frozenset()
    if isinstance(amenities, Mapping):
        keys = [k for k, v in amenities.items() if v]
    elif isinstance(amenities, (list, tuple, set, frozenset)):
        keys = [a for a in amenities if isinstance(a, str)]
    else:
        return frozenset()
    return frozenset(filter(None, (normalize_amenity_key(k) for k in keys)))


def normalize_property_type(value: Optional[str]) -> Optional[str]:
    key = _key(value)
    if not key:
        return None
    return PROPERTY_TYPE_ALIASES.get(key, key)


def normalize_transaction_type(value: Optional[str]) -> Optional[str]:
    key = _key(value)
    if not key:
        return None
    return TRANSACTION_ALIASES.get(key, key)


def normalize_condition(value: Optional[str]) -> Optional[ConditionTier]:
    """Mapea etiquetas libres/enum de estado a la escala ordinal."""
    key = _key(value)
    if not key:
        return None
    if key in CONDITION_ALIASES:
        return CONDITION_ALIASES[key]
    try:
        return ConditionTier[key.upper()]
    except KeyError:
        return None


def normalize_furnished(value: Optional[str]) -> Optional[str]:
    """NO/PARTIALLY/FULLY y variantes -> "no", "partially", "fully"."""
    return FURNISHED_ALIASES.get(_key(value))


def property_size_sqm(listing: CandidateListing) -> Optional[float]:
    """Superficie neta, si no bruta, si no convertida desde pies²."""
    if listing.size_net_sqm:
        return listing.size_net_sqm
    if listing.size_gross_sqm:
        return listing.size_gross_sqm
    if listing.square_feet:
        return round(listing.square_feet * SQFT_TO_SQM)
    return None


@dataclass(frozen=True)
class NormalizedRequirement:
    """Vista comparable de un RequirementProfile."""

    id: Optional[str]
    budget_min: Optional[float]
    budget_max: Optional[float]
    locations: frozenset[str]
    property_types: frozenset[str]
    bedrooms_min: Optional[int]
    bedrooms_max: Optional[int]
    bathrooms_min: Optional[int]
    bathrooms_max: Optional[int]
    size_min_sqm: Optional[float]
    size_max_sqm: Optional[float]
    transactions: frozenset[str]
    preferences: tuple[ExtractedPreference, ...] = ()
    conditions: frozenset[ConditionTier] = field(default_factory=frozenset)

    @property
    def has_budget(self) -> bool:
        return self.budget_min is not None or self.budget_max is not None


@dataclass(frozen=True)
class NormalizedListing:
    """Vista comparable de un CandidateListing."""

    id: Optional[str]
    price: Optional[float]
    locations: frozenset[str]
    property_type: Optional[str]
    transaction_type: Optional[str]
    bedrooms: Optional[int]
    bathrooms: Optional[int]
    floor: Optional[float]
    elevator: Optional[bool]
    size_sqm: Optional[float]
    amenities: frozenset[str] = field(default_factory=frozenset)
    description: str = ""
    condition: Optional[ConditionTier] = None
    accepts_pets: Optional[bool] = None
    furnished: Optional[str] = None

    @property
    def amenities_text(self) -> str:
        """Amenities serializados en minúsculas para búsqueda por substring."""
        return " ".join(sorted(self.amenities))


class CriteriaNormalizer:
    """
    Convierte perfiles y propiedades a vistas comparables.

    Los montos se expresan en la moneda base; una moneda sin tipo de
    cambio configurado deja el presupuesto/precio como no evaluable.
    """

    def __init__(
        self,
        exchange_rates: Optional[Mapping[str, float]] = None,
        base_currency: str = "EUR",
    ):
        self.base_currency = base_currency.upper()
        rates = {k.upper(): v for k, v in (exchange_rates or DEFAULT_EXCHANGE_RATES).items()}
        rates.setdefault(self.base_currency, 1.0)
        self.exchange_rates = rates

    def to_base_currency(self, amount: Optional[float], currency: Optional[str]) -> Optional[float]:
        if amount is None:
            return None
        rate = self.exchange_rates.get((currency or self.base_currency).upper())
        if rate is None:
            return None
        return amount * rate

    def normalize_requirement(
        self,
        profile: RequirementProfile,
        preferences: tuple[ExtractedPreference, ...] = (),
    ) -> NormalizedRequirement:
        budget_min = self.to_base_currency(profile.budget_min, profile.currency)
        budget_max = self.to_base_currency(profile.budget_max, profile.currency)
        if budget_min is not None and budget_max is not None and budget_min > budget_max:
            budget_min, budget_max = budget_max, budget_min

        property_types = frozenset(
            filter(None, (normalize_property_type(t) for t in profile.property_types))
        )
        transactions = (
            INTENT_TO_TRANSACTION.get(profile.intent, frozenset())
            if profile.intent
            else frozenset()
        )

        return NormalizedRequirement(
            id=profile.id,
            budget_min=budget_min,
            budget_max=budget_max,
            locations=normalize_locations(profile.locations),
            property_types=property_types,
            bedrooms_min=profile.bedrooms_min,
            bedrooms_max=profile.bedrooms_max,
            bathrooms_min=profile.bathrooms_min,
            bathrooms_max=profile.bathrooms_max,
            size_min_sqm=profile.size_min_sqm,
            size_max_sqm=profile.size_max_sqm,
            transactions=transactions,
            preferences=tuple(preferences),
            conditions=frozenset(
                tier
                for tier in map(normalize_condition, profile.condition_preferences)
                if tier is not None
            ),
        )

    def normalize_listing(self, listing: CandidateListing) -> NormalizedListing:
        return NormalizedListing(
            id=listing.id,
            price=self.to_base_currency(listing.price, listing.currency),
            locations=listing_locations(listing),
            property_type=normalize_property_type(listing.property_type),
            transaction_type=normalize_transaction_type(listing.transaction_type),
            bedrooms=listing.bedrooms,
            bathrooms=listing.bathrooms,
            floor=parse_floor(listing.floor),
            elevator=listing.elevator,
            size_sqm=property_size_sqm(listing),
            amenities=extract_amenities(listing.amenities),
            description=normalize_text(listing.description),
            condition=normalize_condition(listing.condition),
            accepts_pets=listing.accepts_pets,
            furnished=normalize_furnished(listing.furnished),
        )

    def normalize(
        self,
        profile: RequirementProfile,
        listing: CandidateListing,
        preferences: tuple[ExtractedPreference, ...] = (),
    ) -> tuple[NormalizedRequirement, NormalizedListing]:
        """Normaliza ambos lados de un par."""
        return (
            self.normalize_requirement(profile, preferences),
            self.normalize_listing(listing),
        )
