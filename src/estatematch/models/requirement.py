"""
Modelo de Requerimientos del Cliente

Define lo que busca un cliente del CRM: criterios estructurados
(presupuesto, zonas, tipo, dormitorios) y preferencias inferidas
de sus notas en texto libre.
"""

import json
import re
from enum import Enum
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from estatematch.models.coercion import to_optional_float, to_optional_int, to_string_list

logger = structlog.get_logger()


class PreferenceType(str, Enum):
    """Vocabulario cerrado de preferencias que se pueden inferir de texto libre."""

    ELEVATOR = "elevator"
    GROUND_FLOOR = "groundFloor"
    BALCONY = "balcony"
    SEA_VIEW = "seaView"
    RENOVATED = "renovated"
    NEW_BUILD = "newBuild"
    QUIET = "quiet"
    BRIGHT = "bright"
    PARKING = "parking"
    PET_FRIENDLY = "petFriendly"
    GARDEN = "garden"
    POOL = "pool"
    STORAGE = "storage"
    FIREPLACE = "fireplace"
    AIR_CONDITIONING = "airConditioning"
    FURNISHED = "furnished"
    SHOWER = "shower"
    MODERN_KITCHEN = "modernKitchen"


class Importance(str, Enum):
    """Nivel de importancia de una preferencia."""

    REQUIRED = "required"
    PREFERRED = "preferred"
    NICE_TO_HAVE = "nice_to_have"

    @property
    def rank(self) -> int:
        """Orden relativo: mayor es más importante."""
        return _IMPORTANCE_RANK[self]


_IMPORTANCE_RANK = {
    Importance.REQUIRED: 3,
    Importance.PREFERRED: 2,
    Importance.NICE_TO_HAVE: 1,
}


class Intent(str, Enum):
    """Qué quiere hacer el cliente."""

    BUY = "buy"
    RENT = "rent"
    INVEST = "invest"


class ExtractedPreference(BaseModel):
    """
    Una preferencia inferida (o provista por el caller).

    value=True significa "lo quiere", value=False "lo quiere evitar".
    """

    model_config = ConfigDict(frozen=True)

    type: PreferenceType
    value: bool = True
    importance: Importance = Importance.NICE_TO_HAVE
    source_text: str = Field(
        default="", description="Segmento de texto del que se extrajo"
    )


class RequirementProfile(BaseModel):
    """
    Criterios de búsqueda de un cliente.

    Se construye por cada request a partir del registro del CRM;
    este módulo no lo persiste.
    """

    model_config = ConfigDict(from_attributes=True)

    # Identificadores
    id: Optional[str] = Field(None, description="UUID del cliente en el CRM")
    name: Optional[str] = Field(None, description="Nombre para mostrar")

    # Presupuesto
    budget_min: Optional[float] = Field(None, description="Presupuesto mínimo")
    budget_max: Optional[float] = Field(None, description="Presupuesto máximo")
    currency: str = Field(default="EUR", description="Moneda del presupuesto")

    # Ubicación y tipo
    locations: list[str] = Field(
        default_factory=list, description="Zonas de interés"
    )
    property_types: list[str] = Field(
        default_factory=list, description="Tipos de propiedad aceptables"
    )

    # Ambientes
    bedrooms_min: Optional[int] = Field(None, description="Mínimo de dormitorios")
    bedrooms_max: Optional[int] = Field(None, description="Máximo de dormitorios")
    bathrooms_min: Optional[int] = Field(None, description="Mínimo de baños")
    bathrooms_max: Optional[int] = Field(None, description="Máximo de baños")

    # Superficie
    size_min_sqm: Optional[float] = Field(None, description="Superficie mínima m²")
    size_max_sqm: Optional[float] = Field(None, description="Superficie máxima m²")

    intent: Optional[Intent] = Field(None, description="buy, rent o invest")
    condition_preferences: list[str] = Field(
        default_factory=list, description="Estados aceptables: EXCELLENT, VERY_GOOD, ..."
    )

    # Texto libre y preferencias ya conocidas
    notes: Optional[str] = Field(None, description="Notas del agente sobre el cliente")
    preferences: list[ExtractedPreference] = Field(
        default_factory=list,
        description="Preferencias provistas por el caller (ej: cacheadas)",
    )

    @field_validator("budget_min", "budget_max", "size_min_sqm", "size_max_sqm", mode="before")
    @classmethod
    def _lenient_float(cls, value):
        return to_optional_float(value)

    @field_validator(
        "bedrooms_min", "bedrooms_max", "bathrooms_min", "bathrooms_max", mode="before"
    )
    @classmethod
    def _lenient_int(cls, value):
        return to_optional_int(value)

    @field_validator("locations", "property_types", "condition_preferences", mode="before")
    @classmethod
    def _lenient_list(cls, value):
        return to_string_list(value)

    @field_validator("intent", mode="before")
    @classmethod
    def _lenient_intent(cls, value):
        if not value:
            return None
        normalized = str(value).strip().lower()
        if normalized in {"lease"}:
            normalized = "rent"
        return normalized if normalized in {i.value for i in Intent} else None

    @field_validator("currency", mode="before")
    @classmethod
    def _upper_currency(cls, value):
        return str(value).strip().upper() if value else "EUR"

    @classmethod
    def from_db_row(cls, row: dict) -> "RequirementProfile":
        """
        Construye el perfil a partir de una fila de la tabla clients.

        Las preferencias estructuradas viven en el JSON property_preferences.
        """
        prefs = row.get("property_preferences") or {}
        if isinstance(prefs, str):
            try:
                prefs = json.loads(prefs)
            except json.JSONDecodeError:
                prefs = {}
        if not isinstance(prefs, dict):
            prefs = {}

        return cls(
            id=row.get("id"),
            name=row.get("full_name") or row.get("client_name"),
            budget_min=row.get("budget_min"),
            budget_max=row.get("budget_max"),
            currency=row.get("currency") or "EUR",
            locations=row.get("areas_of_interest"),
            property_types=prefs.get("property_types"),
            bedrooms_min=prefs.get("bedrooms_min"),
            bedrooms_max=prefs.get("bedrooms_max"),
            bathrooms_min=prefs.get("bathrooms_min"),
            bathrooms_max=prefs.get("bathrooms_max"),
            size_min_sqm=prefs.get("size_min_sqm"),
            size_max_sqm=prefs.get("size_max_sqm"),
            intent=row.get("intent"),
            condition_preferences=prefs.get("condition_preferences"),
            notes=row.get("notes"),
            preferences=preferences_from_flags(prefs),
        )


# ============================================
# PREFERENCIAS ESTRUCTURADAS DEL CRM
# ============================================

# Flags booleanos de property_preferences -> preferencia obligatoria
REQUIRED_FLAGS: dict[str, PreferenceType] = {
    "requires_elevator": PreferenceType.ELEVATOR,
    "requires_parking": PreferenceType.PARKING,
    "requires_pet_friendly": PreferenceType.PET_FRIENDLY,
    "ground_floor_only": PreferenceType.GROUND_FLOOR,
}

# Nombres de amenities del CRM que no coinciden con el valor del enum
AMENITY_ALIASES: dict[str, PreferenceType] = {
    "lift": PreferenceType.ELEVATOR,
    "swimming_pool": PreferenceType.POOL,
    "garage": PreferenceType.PARKING,
    "parking_space": PreferenceType.PARKING,
    "pets": PreferenceType.PET_FRIENDLY,
    "pet_friendly": PreferenceType.PET_FRIENDLY,
    "yard": PreferenceType.GARDEN,
    "storage_room": PreferenceType.STORAGE,
    "air_conditioning": PreferenceType.AIR_CONDITIONING,
    "ac": PreferenceType.AIR_CONDITIONING,
    "a/c": PreferenceType.AIR_CONDITIONING,
    "sea_view": PreferenceType.SEA_VIEW,
    "ground_floor": PreferenceType.GROUND_FLOOR,
    "new_build": PreferenceType.NEW_BUILD,
    "modern_kitchen": PreferenceType.MODERN_KITCHEN,
    "veranda": PreferenceType.BALCONY,
}

_TYPES_BY_VALUE = {t.value.lower(): t for t in PreferenceType}


def _is_true(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes"}


def preference_type_for(name) -> Optional[PreferenceType]:
    """
    Tipo de preferencia para un nombre de amenity del CRM.

    Acepta el valor del enum ("seaView") o variantes ("Sea View",
    "swimming-pool"). Devuelve None si no es un tipo conocido.
    """
    if not isinstance(name, str) or not name.strip():
        return None
    key = re.sub(r"[\s\-]+", "_", name.strip().lower())
    return (
        _TYPES_BY_VALUE.get(key)
        or _TYPES_BY_VALUE.get(key.replace("_", ""))
        or AMENITY_ALIASES.get(key)
    )


def preferences_from_flags(prefs: dict) -> list[ExtractedPreference]:
    """
    Convierte los campos estructurados de property_preferences en
    preferencias provistas.

    - requires_* / ground_floor_only / amenities_required -> required
    - amenities_preferred y furnished_preference -> preferred
      (furnished_preference "NO" significa evitar amueblado)

    Una entrada por tipo: la primera gana, y las obligatorias van primero.
    """
    found: dict[PreferenceType, ExtractedPreference] = {}

    def add(pref_type, importance, source, value=True):
        if pref_type is None:
            logger.debug("Amenity sin tipo de preferencia", amenity=source)
            return
        if pref_type not in found:
            found[pref_type] = ExtractedPreference(
                type=pref_type, value=value, importance=importance, source_text=source
            )

    for flag, pref_type in REQUIRED_FLAGS.items():
        if _is_true(prefs.get(flag)):
            add(pref_type, Importance.REQUIRED, flag)

    for name in to_string_list(prefs.get("amenities_required")):
        add(preference_type_for(name), Importance.REQUIRED, name)

    for name in to_string_list(prefs.get("amenities_preferred")):
        add(preference_type_for(name), Importance.PREFERRED, name)

    furnished = str(prefs.get("furnished_preference") or "").strip().upper()
    if furnished in {"FULLY", "PARTIALLY"}:
        add(PreferenceType.FURNISHED, Importance.PREFERRED, "furnished_preference")
    elif furnished == "NO":
        add(PreferenceType.FURNISHED, Importance.PREFERRED, "furnished_preference", value=False)

    return list(found.values())
