"""
Adapters layer - External integrations (hosted database).
"""

from .mock_client import MockClient
from .supabase_client import SupabaseClient

__all__ = ["MockClient", "SupabaseClient"]
