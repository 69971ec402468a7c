"""
Repositorios de solo lectura sobre Supabase.

Cada repositorio maneja una tabla y siempre filtra por organización:
el motor de matching nunca mezcla datos de distintos tenants.
"""

from typing import Optional

import structlog
from tenacity import retry, stop_after_attempt, wait_exponential

from estatematch.database.supabase_client import get_supabase_client, SupabaseClient

logger = structlog.get_logger()

ORG_COLUMN = "organizationId"

CLIENT_COLUMNS = (
    "id, client_name, full_name, intent, budget_min, budget_max, currency, "
    "areas_of_interest, property_preferences, client_status, notes"
)

PROPERTY_COLUMNS = (
    "id, property_name, price, currency, property_type, transaction_type, "
    "property_status, area, address_city, address_state, municipality, "
    "bedrooms, bathrooms, size_net_sqm, size_gross_sqm, square_feet, floor, "
    "elevator, accepts_pets, furnished, amenities, description, condition"
)

_read_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


class BaseRepository:
    """Clase base para repositorios."""

    TABLE = ""
    COLUMNS = "*"

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client

    @_read_retry
    def get_by_id(self, organization_id: str, record_id: str) -> Optional[dict]:
        """Obtiene un registro por UUID dentro de la organización."""
        try:
            response = (
                self.client.table(self.TABLE)
                .select(self.COLUMNS)
                .eq(ORG_COLUMN, organization_id)
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(
                "Error leyendo registro",
                table=self.TABLE,
                record_id=record_id,
                error=str(e),
            )
            raise
        return response.data[0] if response.data else None

    def _get_by_statuses(
        self, organization_id: str, status_column: str, statuses: list[str]
    ) -> list[dict]:
        try:
            response = (
                self.client.table(self.TABLE)
                .select(self.COLUMNS)
                .eq(ORG_COLUMN, organization_id)
                .in_(status_column, statuses)
                .execute()
            )
        except Exception as e:
            logger.error(
                "Error leyendo registros activos",
                table=self.TABLE,
                organization_id=organization_id,
                error=str(e),
            )
            raise

        logger.info(
            "Registros activos obtenidos",
            table=self.TABLE,
            organization_id=organization_id,
            total=len(response.data),
        )
        return response.data


class ClientRepository(BaseRepository):
    """Repositorio para clientes del CRM."""

    TABLE = "clients"
    COLUMNS = CLIENT_COLUMNS
    COMMENTS_TABLE = "client_comments"

    @_read_retry
    def get_active(self, organization_id: str, statuses: list[str]) -> list[dict]:
        """Clientes de la organización en alguno de los estados dados."""
        return self._get_by_statuses(organization_id, "client_status", statuses)

    @_read_retry
    def get_comments(
        self, organization_id: str, client_id: str, limit: int = 20
    ) -> list[str]:
        """Últimos comentarios del cliente, del más reciente al más viejo."""
        try:
            response = (
                self.client.table(self.COMMENTS_TABLE)
                .select("content")
                .eq(ORG_COLUMN, organization_id)
                .eq("clientId", client_id)
                .order("createdAt", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error(
                "Error leyendo comentarios",
                table=self.COMMENTS_TABLE,
                client_id=client_id,
                error=str(e),
            )
            raise
        return [row["content"] for row in response.data if row.get("content")]


class PropertyRepository(BaseRepository):
    """Repositorio para propiedades del MLS."""

    TABLE = "properties"
    COLUMNS = PROPERTY_COLUMNS

    @_read_retry
    def get_active(self, organization_id: str, statuses: list[str]) -> list[dict]:
        """Propiedades de la organización en alguno de los estados dados."""
        return self._get_by_statuses(organization_id, "property_status", statuses)
