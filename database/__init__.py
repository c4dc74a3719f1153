"""Persistence adapters."""

from database.provider_store import SupabaseProviderStore

__all__ = ['SupabaseProviderStore']
