"""
Supabase Adapter - Hosted listing store over PostgREST.
"""

from .client import SupabaseStore, encode_query

__all__ = ["SupabaseStore", "encode_query"]
