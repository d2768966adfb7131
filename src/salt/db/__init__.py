"""
Salt - Database Client.

Provides Supabase access for the catalog and library services.
"""

from salt.db.adapter import DatabaseAdapter
from salt.db.client import get_authenticated_client, get_client, get_service_client

__all__ = [
    "DatabaseAdapter",
    "get_client",
    "get_service_client",
    "get_authenticated_client",
]
