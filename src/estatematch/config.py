"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Encontrar la raíz del proyecto (donde está el .env)
# config.py -> estatematch/ -> src/ -> project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: Optional[str] = Field(None, description="URL del proyecto Supabase")
    supabase_key: Optional[str] = Field(None, description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para operaciones admin"
    )

    # Matching
    default_min_score: float = Field(
        0.0, ge=0.0, le=100.0, description="Score mínimo por defecto (0 = sin filtro)"
    )
    default_result_limit: int = Field(
        20, ge=1, description="Cantidad máxima de resultados por defecto"
    )
    fair_match_threshold: float = Field(
        50.0, ge=0.0, le=100.0, description="Score a partir del cual un match es aceptable"
    )
    budget_tolerance_percent: float = Field(
        0.0, ge=0.0, le=100.0, description="Tolerancia (%) sobre el rango de presupuesto"
    )

    # Monedas
    base_currency: str = Field("EUR", description="Moneda de comparación de precios")
    exchange_rates: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_EXCHANGE_RATES),
        description="Unidades de moneda base por unidad de cada moneda",
    )

    # Filtros de estado del CRM/MLS
    client_statuses: list[str] = Field(
        default_factory=lambda: ["LEAD", "ACTIVE"],
        description="Estados de cliente que participan del matching",
    )
    property_statuses: list[str] = Field(
        default_factory=lambda: ["ACTIVE", "PENDING"],
        description="Estados de propiedad que participan del matching",
    )

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Constantes del sistema
DEFAULT_EXCHANGE_RATES = {
    "EUR": 1.0,
    "USD": 0.92,
    "GBP": 1.17,
}
