"""
Modelo de Propiedad Candidata

Representa un inmueble del MLS tal como lo entrega el data store,
de solo lectura durante un request de matching.
"""

import json
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from estatematch.models.coercion import to_optional_float, to_optional_int


class CandidateListing(BaseModel):
    """Propiedad a evaluar contra uno o más perfiles de requerimientos."""

    model_config = ConfigDict(from_attributes=True)

    # Identificadores
    id: Optional[str] = Field(None, description="UUID de la propiedad en el MLS")
    name: Optional[str] = Field(None, description="Nombre/título de la propiedad")

    # Precio
    price: Optional[float] = Field(None, description="Precio publicado")
    currency: str = Field(default="EUR", description="Moneda del precio")

    # Ubicación
    area: Optional[str] = Field(None, description="Zona/barrio")
    city: Optional[str] = Field(None, description="Ciudad")
    municipality: Optional[str] = Field(None, description="Municipio")
    state: Optional[str] = Field(None, description="Prefectura/región")

    # Características físicas
    bedrooms: Optional[int] = Field(None, description="Cantidad de dormitorios")
    bathrooms: Optional[int] = Field(None, description="Cantidad de baños")
    property_type: Optional[str] = Field(None, description="apartment, house, ...")
    transaction_type: Optional[str] = Field(None, description="sale, rental, ...")
    floor: Optional[str] = Field(None, description="Piso como texto: '3', 'ground', 'ισόγειο'")
    elevator: Optional[bool] = Field(None, description="Tiene ascensor")
    accepts_pets: Optional[bool] = Field(None, description="Acepta mascotas")
    furnished: Optional[str] = Field(None, description="NO, PARTIALLY o FULLY")
    size_net_sqm: Optional[float] = Field(None, description="Superficie neta m²")
    size_gross_sqm: Optional[float] = Field(None, description="Superficie bruta m²")
    square_feet: Optional[float] = Field(None, description="Superficie en pies²")

    # Extras
    amenities: Union[dict[str, Any], list[str], None] = Field(
        None, description="Amenities: {'pool': true} o ['pool', 'gym']"
    )
    description: Optional[str] = Field(None, description="Descripción libre")
    condition: Optional[str] = Field(None, description="Estado: excellent, good, ...")

    @field_validator(
        "price", "size_net_sqm", "size_gross_sqm", "square_feet", mode="before"
    )
    @classmethod
    def _lenient_float(cls, value):
        return to_optional_float(value)

    @field_validator("bedrooms", "bathrooms", mode="before")
    @classmethod
    def _lenient_int(cls, value):
        return to_optional_int(value)

    @field_validator("floor", mode="before")
    @classmethod
    def _floor_as_text(cls, value):
        if value is None:
            return None
        return str(value)

    @field_validator("elevator", "accepts_pets", mode="before")
    @classmethod
    def _lenient_bool(cls, value):
        if value is None or isinstance(value, bool):
            return value
        normalized = str(value).strip().lower()
        if normalized in {"true", "yes", "1", "ναι"}:
            return True
        if normalized in {"false", "no", "0", "οχι", "όχι"}:
            return False
        return None

    @field_validator("furnished", mode="before")
    @classmethod
    def _furnished_as_text(cls, value):
        if value is None:
            return None
        if isinstance(value, bool):
            return "FULLY" if value else "NO"
        return str(value)

    @field_validator("amenities", mode="before")
    @classmethod
    def _parse_amenities(cls, value):
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                return [part.strip() for part in value.split(",") if part.strip()]
        if isinstance(value, (dict, list)):
            return value
        return None

    @field_validator("currency", mode="before")
    @classmethod
    def _upper_currency(cls, value):
        return str(value).strip().upper() if value else "EUR"

    @classmethod
    def from_db_row(cls, row: dict) -> "CandidateListing":
        """Construye la propiedad a partir de una fila de la tabla properties."""
        return cls(
            id=row.get("id"),
            name=row.get("property_name"),
            price=row.get("price"),
            currency=row.get("currency") or "EUR",
            area=row.get("area"),
            city=row.get("address_city"),
            municipality=row.get("municipality"),
            state=row.get("address_state"),
            bedrooms=row.get("bedrooms"),
            bathrooms=row.get("bathrooms"),
            property_type=row.get("property_type"),
            transaction_type=row.get("transaction_type"),
            floor=row.get("floor"),
            elevator=row.get("elevator"),
            accepts_pets=row.get("accepts_pets"),
            furnished=row.get("furnished"),
            size_net_sqm=row.get("size_net_sqm"),
            size_gross_sqm=row.get("size_gross_sqm"),
            square_feet=row.get("square_feet"),
            amenities=row.get("amenities"),
            description=row.get("description"),
            condition=row.get("condition"),
        )
