"""
Módulo de base de datos.

Provee acceso de lectura a clientes y propiedades en Supabase.
"""

from estatematch.database.supabase_client import get_supabase_client, SupabaseClient
from estatematch.database.repositories import (
    ClientRepository,
    PropertyRepository,
)

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "ClientRepository",
    "PropertyRepository",
]
